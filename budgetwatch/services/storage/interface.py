"""
Abstract Storage Interface

We define an abstract interface for key-value storage. This allows us to:
1. Keep account and settings data in a plain JSON file
2. Use in-memory storage for testing
3. Swap in another backend without touching the stores

The interface is intentionally simple: a flat namespace of keys holding
strings, booleans, numbers or lists of strings, with batched writes.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional, Union


StoredValue = Union[str, bool, int, float, list[str]]


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for one key-value namespace.

    Reads return the last committed state. A commit is all-or-nothing:
    readers never observe half of a batch.
    """

    @abstractmethod
    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Read a value.

        Args:
            key: The key to read
            default: Returned when the key is absent

        Returns:
            The stored value, or default
        """
        pass

    @abstractmethod
    def contains(self, key: str) -> bool:
        """Check whether a key is present."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List every key in the namespace."""
        pass

    @abstractmethod
    def commit(
        self,
        puts: Mapping[str, StoredValue],
        removals: Iterable[str] = (),
    ) -> None:
        """
        Apply a batch of writes atomically.

        Removals are applied before puts, so a key that is both removed
        and put ends up holding the put value.

        Args:
            puts: Keys to set and their new values
            removals: Keys to delete (absent keys are ignored)

        Raises:
            StorageError: If the batch cannot be written
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every key in the namespace."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Stored data exists but cannot be read back."""
    pass
