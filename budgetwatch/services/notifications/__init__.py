"""Notification host services."""

from budgetwatch.services.notifications.builder import NotificationBuilder
from budgetwatch.services.notifications.interface import (
    NotificationError,
    NotificationHostInterface,
    UnknownChannelError,
)
from budgetwatch.services.notifications.tray import NotificationTray

__all__ = [
    "NotificationBuilder",
    "NotificationError",
    "NotificationHostInterface",
    "NotificationTray",
    "UnknownChannelError",
]
