"""Key-value string storage backing the itinerary slot.

``JsonFileStorage`` keeps every key in one JSON object on disk, much like a
browser's local storage. ``InMemoryStorage`` is used for tests and throwaway
sessions. Both raise ``PersistenceReadFailed`` / ``PersistenceWriteFailed``;
deciding whether to swallow those is left to the caller.
"""

import json
import logging
import os
import shutil
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .errors import PersistenceReadFailed, PersistenceWriteFailed

logger = logging.getLogger(__name__)


def _ensure_dir(path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def _atomic_write_json(path: str, data: Dict[str, str]) -> None:
    """
    Atomically write JSON content to disk.
    - Write to .tmp then replace
    - Keep a .bak copy of the previous file
    """
    _ensure_dir(path)
    tmp_path = f"{path}.tmp"
    bak_path = f"{path}.bak"
    try:
        if os.path.exists(path):
            try:
                shutil.copy2(path, bak_path)
            except OSError:
                logger.warning("Could not back up %s", path, exc_info=True)
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                logger.debug("Could not remove %s", tmp_path, exc_info=True)


class KeyValueStorage(ABC):
    """Get, set and remove string values by key."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key`` or None when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class InMemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """All keys live in a single JSON object file, rewritten on every change."""

    def __init__(self, path: str):
        self.path = path

    def _read_all(self, key: str) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceReadFailed(key, f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceReadFailed(key, f"{self.path} does not hold a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, key: str, data: Dict[str, str]) -> None:
        try:
            _atomic_write_json(self.path, data)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceWriteFailed(key, f"Cannot write {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        return self._read_all(key).get(key)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all(key)
        except PersistenceReadFailed:
            # an unreadable file is replaced rather than blocking every write
            logger.warning("Overwriting unreadable storage file %s", self.path)
            data = {}
        data[key] = str(value)
        self._write_all(key, data)

    def remove(self, key: str) -> None:
        data = self._read_all(key)
        if key in data:
            data.pop(key)
            self._write_all(key, data)
