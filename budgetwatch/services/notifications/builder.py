"""Builds the channels and notifications the notifier publishes."""

from budgetwatch.budget.formatting import render_summary
from budgetwatch.config.settings import NotificationSettings
from budgetwatch.models.budget import AggregateTotals, AlertTier
from budgetwatch.models.notification import (
    Notification,
    NotificationChannel,
    NotificationImportance,
    NotificationPriority,
)


class NotificationBuilder:
    """
    Helper class to build notifications from configured ids and titles.

    Usage:
        builder = NotificationBuilder(get_settings().notifications)
        host.notify(builder.summary(totals))
        host.notify(builder.alert(AlertTier.OVER))
    """

    def __init__(self, settings: NotificationSettings):
        self._settings = settings

    @property
    def summary_id(self) -> int:
        return self._settings.summary_notification_id

    @property
    def alert_id(self) -> int:
        return self._settings.alert_notification_id

    def channels(self) -> list[NotificationChannel]:
        """The low-importance summary channel and the high-importance alert channel."""
        return [
            NotificationChannel(
                channel_id=self._settings.summary_channel_id,
                name="Budget Updates",
                description="Always-on budget summary",
                importance=NotificationImportance.LOW,
            ),
            NotificationChannel(
                channel_id=self._settings.alert_channel_id,
                name="Budget Alerts",
                description="Alerts when close to or over budget",
                importance=NotificationImportance.HIGH,
            ),
        ]

    def summary(self, totals: AggregateTotals) -> Notification:
        return Notification(
            notification_id=self._settings.summary_notification_id,
            channel_id=self._settings.summary_channel_id,
            title=self._settings.summary_title,
            body=render_summary(totals),
            ongoing=True,
            only_alert_once=True,
        )

    def alert(self, tier: AlertTier) -> Notification:
        """
        Raises:
            ValueError: If the tier does not raise an alert
        """
        if not tier.raises_alert:
            raise ValueError(f"Tier {tier.value!r} does not raise an alert")
        return Notification(
            notification_id=self._settings.alert_notification_id,
            channel_id=self._settings.alert_channel_id,
            title=self._settings.alert_title,
            body=tier.message,
            priority=NotificationPriority.HIGH,
        )
