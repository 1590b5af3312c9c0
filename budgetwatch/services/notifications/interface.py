"""
Abstract Notification Host Interface

The notifier never draws anything itself. It hands notifications to a
host that displays, updates and removes them by id, the way a desktop
or mobile notification centre does.
"""

from abc import ABC, abstractmethod

from budgetwatch.models.notification import Notification, NotificationChannel


class NotificationHostInterface(ABC):
    """
    Abstract interface for a notification surface.

    Any host (in-process tray, desktop notifications, etc.)
    must implement these methods.
    """

    @abstractmethod
    def create_channel(self, channel: NotificationChannel) -> None:
        """
        Register a channel. Registering an existing channel id updates it.
        """
        pass

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """
        Display a notification, replacing any showing with the same id.

        Raises:
            NotificationError: If the notification cannot be shown
        """
        pass

    @abstractmethod
    def cancel(self, notification_id: int) -> None:
        """Remove a notification. No-op if it is not showing."""
        pass

    @abstractmethod
    def is_showing(self, notification_id: int) -> bool:
        """Check whether a notification is currently displayed."""
        pass


class NotificationError(Exception):
    """Base exception for notification host operations."""
    pass


class UnknownChannelError(NotificationError):
    """Notification posted to a channel that was never created."""
    pass
