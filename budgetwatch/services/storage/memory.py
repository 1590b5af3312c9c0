"""
In-Memory Storage Implementation

Used by the tests and whenever the storage backend is set to "memory".
Nothing survives the process.
"""

import threading
from typing import Any, Iterable, Mapping, Optional

from budgetwatch.services.storage.interface import KeyValueStoreInterface, StoredValue


def _copy_value(value: Any) -> Any:
    """Lists are handed out and taken in as copies."""
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return value


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """
    Dict-backed key-value namespace.

    A commit builds the new state on the side and swaps it in, so readers
    see either the whole batch or none of it.
    """

    def __init__(self, initial: Optional[Mapping[str, StoredValue]] = None):
        self._data: dict[str, Any] = {
            key: _copy_value(value) for key, value in (initial or {}).items()
        }
        self._lock = threading.RLock()

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return _copy_value(self._data.get(key, default))

    def contains(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> list[str]:
        return list(self._data)

    def commit(
        self,
        puts: Mapping[str, StoredValue],
        removals: Iterable[str] = (),
    ) -> None:
        with self._lock:
            data = dict(self._data)
            for key in removals:
                data.pop(key, None)
            for key, value in puts.items():
                data[key] = _copy_value(value)
            self._write(data)
            self._data = data

    def clear(self) -> None:
        with self._lock:
            self._write({})
            self._data = {}

    def _write(self, data: dict[str, Any]) -> None:
        """Persist a new state before it becomes visible. No-op in memory."""
        pass
