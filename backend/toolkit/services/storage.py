"""
ToolKit Key-Value Storage
String key-value backends behind a small interface, so the saved palette store can
run against a JSON file in production and an in-memory dict in tests.
"""
import json
import os
import tempfile
from abc import ABC, abstractmethod
from threading import Lock
from typing import Dict, Optional

from loguru import logger


class KeyValueStore(ABC):
    """Abstract base class for storage backends. Values are strings."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get value, or None when the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete key; returns whether it existed."""
        pass


class InMemoryStore(KeyValueStore):
    """Process-local store, used as the fake in tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None


class JsonFileStore(KeyValueStore):
    """
    Store backed by one JSON object on disk.

    Writes go to a temporary file that atomically replaces the target.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = Lock()

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Storage file {self.path} unreadable, starting empty: {str(e)}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} is not a JSON object, starting empty")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def delete(self, key: str) -> bool:
        with self._lock:
            data = self._read_all()
            existed = data.pop(key, None) is not None
            if existed:
                self._write_all(data)
            return existed
