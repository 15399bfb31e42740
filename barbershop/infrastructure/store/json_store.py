from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from barbershop.application.exceptions import StoreUnavailable
from barbershop.infrastructure.store.memory_store import MemoryDocumentStore


class JsonDocumentStore(MemoryDocumentStore):
    """Document tree persisted to a single JSON file, rewritten atomically after each write."""

    def __init__(self, data_file: str = "./data/store.json") -> None:
        self._file_path = Path(data_file)
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(self._load())
        self._logger = logging.getLogger(__name__)

    def _load(self) -> dict[str, Any]:
        """Load the tree from disk, return an empty tree if missing or corrupted."""
        if not self._file_path.exists():
            return {}
        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logging.getLogger(__name__).warning(
                "Store file unreadable, starting empty",
                extra={"path": str(self._file_path), "error": str(e)},
            )
            return {}
        return data if isinstance(data, dict) else {}

    def _commit(self, tree: dict[str, Any]) -> None:
        temp_path = self._file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(tree, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            self._logger.error("Error writing store file", extra={"path": str(self._file_path), "error": str(e)})
            raise StoreUnavailable("Could not save to the appointment store") from e
