"""Monotonic count of successful registrations."""
from hashregistry.core.errors import RegistryNotInitialized

COUNT_KEY = "COUNT"


class Counter:
    def __init__(self, store):
        self._store = store

    def is_initialized(self, tx=None) -> bool:
        source = tx if tx is not None else self._store
        return source.contains(COUNT_KEY)

    def reset(self, tx) -> None:
        tx.set(COUNT_KEY, 0)

    def current(self, tx=None) -> int:
        source = tx if tx is not None else self._store
        value = source.get(COUNT_KEY)
        if value is None:
            raise RegistryNotInitialized()
        return int(value)

    def increment(self, tx) -> int:
        new_count = self.current(tx) + 1
        tx.set(COUNT_KEY, new_count)
        return new_count
