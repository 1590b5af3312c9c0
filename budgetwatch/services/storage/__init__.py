"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
JSON files are the default backend; the in-memory store backs the tests.
"""

from budgetwatch.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
    StorageError,
    StoredValue,
)
from budgetwatch.services.storage.memory import InMemoryKeyValueStore
from budgetwatch.services.storage.json_file import JsonFileKeyValueStore

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    "StoredValue",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
