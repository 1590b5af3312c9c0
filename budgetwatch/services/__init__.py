"""Services package."""

from budgetwatch.services.notifications import (
    NotificationBuilder,
    NotificationError,
    NotificationHostInterface,
    NotificationTray,
    UnknownChannelError,
)
from budgetwatch.services.storage import (
    CorruptDataError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    StorageError,
)

__all__ = [
    # Notification services
    "NotificationBuilder",
    "NotificationError",
    "NotificationHostInterface",
    "NotificationTray",
    "UnknownChannelError",
    # Storage services
    "CorruptDataError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "StorageError",
]
