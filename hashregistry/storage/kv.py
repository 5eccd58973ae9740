"""Key-value persistence substrate for the registry.

Every store exposes plain ``get``/``set`` plus ``transaction()``, a context
manager that stages writes and commits them together on normal exit or drops
them when the block raises. Values are JSON-compatible (dicts, lists, ints,
strings); callers get deep copies so committed state cannot be mutated in
place.
"""
import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

logger = logging.getLogger(__name__)

_MISSING = object()


class Transaction:
    """Staged writes on top of a store snapshot.

    Whole values are staged with ``set``; single entries of a mapping value
    are staged with ``set_item`` so large maps are never copied per write.
    """

    def __init__(self, store: "KeyValueStore"):
        self._store = store
        self._writes: Dict[str, Any] = {}
        self._item_writes: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._writes:
            value = copy.deepcopy(self._writes[key])
        else:
            value = self._store._read(key, _MISSING)
        if key in self._item_writes:
            value = {} if value is _MISSING else value
            value.update(copy.deepcopy(self._item_writes[key]))
        return default if value is _MISSING else value

    def get_item(self, key: str, field: str, default: Any = None) -> Any:
        staged = self._item_writes.get(key, {})
        if field in staged:
            return copy.deepcopy(staged[field])
        if key in self._writes:
            value = (self._writes[key] or {}).get(field, default)
            return copy.deepcopy(value)
        return self._store._read_item(key, field, default)

    def set(self, key: str, value: Any) -> None:
        self._item_writes.pop(key, None)
        self._writes[key] = copy.deepcopy(value)

    def set_item(self, key: str, field: str, value: Any) -> None:
        self._item_writes.setdefault(key, {})[field] = copy.deepcopy(value)

    def contains(self, key: str) -> bool:
        return key in self._writes or key in self._item_writes or self._store.contains(key)

    def contains_item(self, key: str, field: str) -> bool:
        if field in self._item_writes.get(key, {}):
            return True
        if key in self._writes:
            return field in (self._writes[key] or {})
        return self._store.contains_item(key, field)

    @property
    def dirty(self) -> bool:
        return bool(self._writes or self._item_writes)

    def apply(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Return a new top-level mapping with the staged writes applied."""
        updated = dict(data)
        updated.update(self._writes)
        for key, items in self._item_writes.items():
            merged = dict(updated.get(key) or {})
            merged.update(items)
            updated[key] = merged
        return updated


class KeyValueStore:
    """Base store; subclasses provide ``_load`` and ``_persist``."""

    def __init__(self):
        self._lock = threading.RLock()
        self._data: Dict[str, Any] = self._load()
        self._active: Optional[Transaction] = None

    def _load(self) -> Dict[str, Any]:
        return {}

    def _persist(self, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def _read(self, key: str, default: Any) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def _read_item(self, key: str, field: str, default: Any) -> Any:
        with self._lock:
            value = (self._data.get(key) or {}).get(field, _MISSING)
            if value is _MISSING:
                return default
            return copy.deepcopy(value)

    def get(self, key: str, default: Any = None) -> Any:
        return self._read(key, default)

    def get_item(self, key: str, field: str, default: Any = None) -> Any:
        """One entry of a mapping value, without copying the whole mapping."""
        return self._read_item(key, field, default)

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def contains_item(self, key: str, field: str) -> bool:
        with self._lock:
            return field in (self._data.get(key) or {})

    def set(self, key: str, value: Any) -> None:
        with self.transaction() as tx:
            tx.set(key, value)

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Hold the store lock, stage writes, commit them atomically.

        Nested calls on the same thread join the outer transaction.
        """
        with self._lock:
            if self._active is not None:
                yield self._active
                return
            tx = Transaction(self)
            self._active = tx
            try:
                yield tx
            finally:
                self._active = None
            if tx.dirty:
                updated = tx.apply(self._data)
                self._persist(updated)
                self._data = updated


class InMemoryKeyValueStore(KeyValueStore):
    def _persist(self, data: Dict[str, Any]) -> None:
        pass


class JsonFileKeyValueStore(KeyValueStore):
    """Whole-snapshot JSON file; each commit is written to a temp file and
    moved over the old one with ``os.replace``."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Store file {self.path} does not contain a JSON object")
        logger.info("Loaded %d keys from %s", len(data), self.path)
        return data

    def _persist(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".registry-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


def create_store(backend: str = "memory", path: Optional[str] = None) -> KeyValueStore:
    backend = (backend or "memory").lower()
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "json":
        if not path:
            raise ValueError("STORE_PATH is required for the json store backend")
        return JsonFileKeyValueStore(path)
    raise ValueError(f"Unsupported STORE_BACKEND: {backend}. Use 'memory' or 'json'.")
