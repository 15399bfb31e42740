from __future__ import annotations

import copy
import logging
import threading
from typing import Any

from barbershop.application.ports.document_store import ChangeCallback, DocumentStorePort, Unsubscribe


class MemoryDocumentStore(DocumentStorePort):
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._tree: dict[str, Any] = copy.deepcopy(initial or {})
        self._subscribers: dict[int, tuple[tuple[str, ...], ChangeCallback]] = {}
        self._next_token = 0
        self._lock = threading.RLock()
        self._logger = logging.getLogger(__name__)

    def get(self, path: str) -> Any:
        with self._lock:
            node: Any = self._tree
            for key in split_path(path):
                if not isinstance(node, dict) or key not in node:
                    return None
                node = node[key]
            return copy.deepcopy(node) if node != {} else None

    def set(self, path: str, value: Any) -> None:
        if value is None:
            self.remove(path)
            return
        keys = split_path(path)
        with self._lock:
            if not keys:
                if not isinstance(value, dict):
                    raise ValueError("The root of the store must be an object")
                tree = copy.deepcopy(value)
            else:
                tree = copy.deepcopy(self._tree)
                node = tree
                for key in keys[:-1]:
                    child = node.get(key)
                    if not isinstance(child, dict):
                        child = {}
                        node[key] = child
                    node = child
                node[keys[-1]] = copy.deepcopy(value)
            self._commit(tree)
            self._tree = tree
        self._notify(keys)

    def remove(self, path: str) -> None:
        keys = split_path(path)
        with self._lock:
            if not keys:
                tree: dict[str, Any] = {}
            else:
                tree = copy.deepcopy(self._tree)
                if not _remove_and_prune(tree, keys):
                    return
            self._commit(tree)
            self._tree = tree
        self._notify(keys)

    def subscribe(self, path: str, callback: ChangeCallback) -> Unsubscribe:
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = (split_path(path), callback)

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(token, None)

        return unsubscribe

    def _commit(self, tree: dict[str, Any]) -> None:
        """Hook for persistent subclasses. Raising keeps the previous tree in place."""
        pass

    def _notify(self, changed: tuple[str, ...]) -> None:
        with self._lock:
            targets = [
                callback
                for watched, callback in self._subscribers.values()
                if _is_related(watched, changed)
            ]
        changed_path = "/".join(changed)
        for callback in targets:
            try:
                callback(changed_path)
            except Exception:
                self._logger.exception("Change subscriber failed", extra={"path": changed_path})


def split_path(path: str) -> tuple[str, ...]:
    return tuple(part for part in path.strip("/").split("/") if part)


def _is_related(watched: tuple[str, ...], changed: tuple[str, ...]) -> bool:
    # A write above the watched node replaces it, a write below changes it.
    size = min(len(watched), len(changed))
    return watched[:size] == changed[:size]


def _remove_and_prune(node: dict[str, Any], keys: tuple[str, ...]) -> bool:
    head, rest = keys[0], keys[1:]
    if head not in node:
        return False
    if not rest:
        del node[head]
        return True
    child = node[head]
    if not isinstance(child, dict) or not _remove_and_prune(child, rest):
        return False
    if not child:
        del node[head]
    return True
