"""
In-process notification tray.

Keeps the active notifications in memory so the dashboard can render
them, and logs every change. Dashboard sessions may call in from
different threads, so every access holds the tray lock.
"""

import threading
from typing import Optional

from budgetwatch.audit import AuditLogger
from budgetwatch.models.notification import Notification, NotificationChannel
from budgetwatch.services.notifications.interface import (
    NotificationHostInterface,
    UnknownChannelError,
)


class NotificationTray(NotificationHostInterface):
    """Notification host that holds notifications in memory."""

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._channels: dict[str, NotificationChannel] = {}
        self._active: dict[int, Notification] = {}
        self._audit_logger = audit_logger
        self._lock = threading.RLock()

    def create_channel(self, channel: NotificationChannel) -> None:
        with self._lock:
            self._channels[channel.channel_id] = channel

    def notify(self, notification: Notification) -> None:
        with self._lock:
            if notification.channel_id not in self._channels:
                raise UnknownChannelError(
                    f"Channel not created: {notification.channel_id}"
                )
            self._active[notification.notification_id] = notification

        if self._audit_logger:
            self._audit_logger.log_notification_shown(
                notification_id=notification.notification_id,
                channel_id=notification.channel_id,
                body=notification.body,
            )

    def cancel(self, notification_id: int) -> None:
        with self._lock:
            removed = self._active.pop(notification_id, None)

        if removed is not None and self._audit_logger:
            self._audit_logger.log_notification_cancelled(notification_id)

    def is_showing(self, notification_id: int) -> bool:
        with self._lock:
            return notification_id in self._active

    def get(self, notification_id: int) -> Optional[Notification]:
        with self._lock:
            return self._active.get(notification_id)

    def active(self) -> list[Notification]:
        """Showing notifications, ordered by id."""
        with self._lock:
            return [self._active[key] for key in sorted(self._active)]

    def channel(self, channel_id: str) -> Optional[NotificationChannel]:
        with self._lock:
            return self._channels.get(channel_id)

    @property
    def channels(self) -> list[NotificationChannel]:
        with self._lock:
            return list(self._channels.values())
