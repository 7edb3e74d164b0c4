"""Minimal record store standing in for the hosted database.

Collections are lists of dicts keyed by an ``id``.  Subscribers get a
``(event, record)`` callback on every change, the way the hosted database
pushed row changes to the app.
"""

import copy
import json
import uuid
from collections import defaultdict
from pathlib import Path
from ww.common.logger import log
from ww.core.errors import RecordNotFoundError

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


class MemoryRecordStore:

    def __init__(self, collections=None):
        self._collections = defaultdict(list)
        for name, rows in (collections or {}).items():
            self._collections[name] = [dict(row) for row in rows]
        self._subscribers = defaultdict(list)

    def insert(self, collection, record):
        row = dict(record)
        row.setdefault("id", str(uuid.uuid4()))
        self._collections[collection].append(row)
        self._changed(collection, INSERT, row)
        return dict(row)

    def update(self, collection, record_id, changes):
        row = self._find(collection, record_id)
        row.update(changes)
        row["id"] = record_id
        self._changed(collection, UPDATE, row)
        return dict(row)

    def delete(self, collection, record_id):
        row = self._find(collection, record_id)
        self._collections[collection].remove(row)
        self._changed(collection, DELETE, row)

    # Rows whose fields equal every given filter, e.g. query("projects", status="actief")
    def query(self, collection, **filters):
        return [
            copy.deepcopy(row) for row in self._collections.get(collection, [])
            if all(row.get(k) == v for k, v in filters.items())
        ]

    def subscribe(self, collection, callback):
        self._subscribers[collection].append(callback)
        def unsubscribe():
            if callback in self._subscribers[collection]:
                self._subscribers[collection].remove(callback)
        return unsubscribe

    def _find(self, collection, record_id):
        for row in self._collections.get(collection, []):
            if row.get("id") == record_id:
                return row
        raise RecordNotFoundError(collection, record_id)

    def _changed(self, collection, event, row):
        log.debug(f"{event} on '{collection}' (id {row.get('id')})")
        for callback in list(self._subscribers[collection]):
            callback(event, dict(row))


class JsonRecordStore(MemoryRecordStore):
    """Record store written through to a JSON file after every change."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(self._read())

    def _read(self):
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            log.warning(f"Could not read records from '{self.path}', starting empty.", exc_info=True)
            return {}
        if not isinstance(data, dict):
            log.warning(f"Records file '{self.path}' is not an object, starting empty.")
            return {}
        return {name: [r for r in rows if isinstance(r, dict)]
                for name, rows in data.items() if isinstance(rows, list)}

    def _changed(self, collection, event, row):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(dict(self._collections), f, indent=2)
        super()._changed(collection, event, row)
