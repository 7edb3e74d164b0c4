"""Durable key-value store used for timer persistence.

The browser build kept its timer in local storage.  On the desktop the same
role is played by a single JSON file mapping keys to strings.  Both stores
expose the same three operations: ``get``, ``set`` and ``remove``.
"""

import json
from pathlib import Path
from ww.common.logger import log


class MemoryStore:
    """Dict-backed store.  Used in tests and as a throwaway fallback."""

    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = str(value)

    def remove(self, key):
        self._data.pop(key, None)

    def __contains__(self, key):
        return key in self._data


class JsonFileStore:
    """Key-value store persisted to one JSON file.

    Every ``set``/``remove`` rewrites the file before returning, so a write
    always happens-before the next read of the same key, even from a fresh
    store pointed at the same path.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._data = self._read()

    def _read(self):
        if not self.path.exists():
            log.info(f"No key-value store found at '{self.path}', starting empty.")
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            log.warning(f"Could not read key-value store at '{self.path}', starting empty.", exc_info=True)
            return {}
        if not isinstance(data, dict):
            log.warning(f"Key-value store at '{self.path}' is not an object, starting empty.")
            return {}
        # Values are always strings, same as local storage
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2)

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = str(value)
        self._write()

    def remove(self, key):
        if key in self._data:
            del self._data[key]
            self._write()

    def __contains__(self, key):
        return key in self._data
