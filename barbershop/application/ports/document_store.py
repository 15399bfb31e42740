from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

ChangeCallback = Callable[[str], None]
Unsubscribe = Callable[[], None]


class DocumentStorePort(ABC):
    """Key-path document tree ("a/b/c"), last write wins, no transactions."""

    @abstractmethod
    def get(self, path: str) -> Any:
        """Return the value at path, or None when nothing is stored there."""
        raise NotImplementedError

    @abstractmethod
    def set(self, path: str, value: Any) -> None:
        """Replace the value at path. Setting None removes it."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, path: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def subscribe(self, path: str, callback: ChangeCallback) -> Unsubscribe:
        """Call callback(changed_path) whenever something at or below path changes."""
        raise NotImplementedError
