"""Configuration package."""

from budgetwatch.config.settings import (
    AlertSettings,
    AppSettings,
    NotificationSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AlertSettings",
    "AppSettings",
    "NotificationSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
