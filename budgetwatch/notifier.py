"""
Budget Notifier

This module ties the components together: it watches both stores and
keeps two notifications in line with them.

1. Summary: always showing while the notifier runs, with the combined
   spent / limit / remaining text.
2. Alert: showing only while alerts are enabled and combined spending is
   close to or over the combined limit.

The notifier is level-triggered. Every trigger (start, any account
change, any settings change) recomputes everything from the current
store contents; the only state it keeps is the last tier, for logging.
Host failures are not caught here: they abort that refresh and
propagate to whoever triggered it. Refreshes triggered from different
threads run one at a time.
"""

import threading
from typing import Optional

from budgetwatch.audit import AuditLogger, configure_logging
from budgetwatch.budget import aggregate, classify, render_summary
from budgetwatch.config import AlertSettings, NotificationSettings, Settings, get_settings
from budgetwatch.models.budget import Account, AlertTier, BudgetSnapshot
from budgetwatch.services.notifications import (
    NotificationBuilder,
    NotificationHostInterface,
    NotificationTray,
)
from budgetwatch.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
)
from budgetwatch.stores import AccountStore, SettingsStore


class BudgetNotifier:
    """
    Keeps the summary and alert notifications in step with the stores.

    Lifecycle:
        start()   -> register channels, subscribe, first refresh
        refresh() -> runs on every store change
        stop()    -> unsubscribe, remove the ongoing summary
    """

    def __init__(
        self,
        account_store: AccountStore,
        settings_store: SettingsStore,
        host: NotificationHostInterface,
        alert_settings: Optional[AlertSettings] = None,
        notification_settings: Optional[NotificationSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._account_store = account_store
        self._settings_store = settings_store
        self._host = host
        self._alert_settings = alert_settings or AlertSettings()
        self._builder = NotificationBuilder(notification_settings or NotificationSettings())
        self._audit_logger = audit_logger

        self._running = False
        self._last_tier: Optional[AlertTier] = None
        self._refresh_lock = threading.RLock()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def last_tier(self) -> Optional[AlertTier]:
        return self._last_tier

    def start(self) -> BudgetSnapshot:
        """
        Start watching the stores. Calling start() again only refreshes.

        Returns:
            The snapshot of the initial refresh
        """
        if self._running:
            return self.refresh()

        for channel in self._builder.channels():
            self._host.create_channel(channel)

        # Subscribe without replay, then refresh once explicitly
        self._account_store.subscribe(self._on_accounts_changed, replay=False)
        self._settings_store.subscribe(self._on_settings_changed, replay=False)
        self._running = True

        if self._audit_logger:
            self._audit_logger.log_notifier_started()

        return self.refresh()

    def stop(self) -> None:
        """Stop watching and remove the ongoing summary. No-op if not running."""
        if not self._running:
            return

        self._account_store.unsubscribe(self._on_accounts_changed)
        self._settings_store.unsubscribe(self._on_settings_changed)
        self._running = False
        self._host.cancel(self._builder.summary_id)

        if self._audit_logger:
            self._audit_logger.log_notifier_stopped()

    def refresh(self) -> BudgetSnapshot:
        """
        Recompute totals and tier, then publish or clear notifications.

        FLOW:
        1. Aggregate all accounts
        2. Publish the summary
        3. Alerts disabled -> clear any showing alert
        4. Otherwise classify: CLOSE/OVER publish the alert, NONE clears it
        """
        with self._refresh_lock:
            totals = aggregate(self._account_store.list_accounts())
            summary = self._builder.summary(totals)
            self._host.notify(summary)

            if self._audit_logger:
                self._audit_logger.log_summary_published(
                    text=summary.body,
                    spent=totals.total_spent,
                    limit=totals.total_limit,
                )

            tier = classify(
                totals,
                close_ratio=self._alert_settings.close_ratio,
                over_ratio=self._alert_settings.over_ratio,
            )
            self._track_tier(tier)

            alerts_enabled = self._settings_store.is_alerts_enabled()
            if not alerts_enabled:
                self._clear_alert("alerts disabled")
            elif tier.raises_alert:
                self._host.notify(self._builder.alert(tier))
                if self._audit_logger:
                    self._audit_logger.log_alert_published(tier=tier.value, message=tier.message)
            else:
                self._clear_alert("spending below alert threshold")

            return BudgetSnapshot(
                totals=totals,
                tier=tier,
                summary_text=render_summary(totals),
                alerts_enabled=alerts_enabled,
                alert_shown=self._host.is_showing(self._builder.alert_id),
            )

    def _clear_alert(self, reason: str) -> None:
        if not self._host.is_showing(self._builder.alert_id):
            return
        self._host.cancel(self._builder.alert_id)
        if self._audit_logger:
            self._audit_logger.log_alert_cleared(reason)

    def _track_tier(self, tier: AlertTier) -> None:
        if tier is self._last_tier:
            return
        if self._audit_logger:
            previous = self._last_tier.value if self._last_tier else None
            self._audit_logger.log_alert_tier_changed(previous=previous, current=tier.value)
        self._last_tier = tier

    def _on_accounts_changed(self, accounts: list[Account]) -> None:
        self.refresh()

    def _on_settings_changed(self, alerts_enabled: bool) -> None:
        self.refresh()


def create_storage(
    namespace: str,
    settings: Optional[Settings] = None,
) -> KeyValueStoreInterface:
    """Open one key-value namespace on the configured backend."""
    storage_settings = (settings or get_settings()).storage
    if storage_settings.backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(storage_settings.namespace_path(namespace))


def create_app_components(
    settings: Optional[Settings] = None,
    host: Optional[NotificationHostInterface] = None,
    start: bool = True,
) -> tuple[AccountStore, SettingsStore, BudgetNotifier, NotificationHostInterface]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to build from (defaults to get_settings())
        host: Notification host (defaults to an in-memory NotificationTray)
        start: Whether to start the notifier before returning

    Returns:
        (account_store, settings_store, notifier, host)

    Raises:
        StorageError: If a namespace file cannot be read
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)
    audit_logger = AuditLogger()

    storage_settings = settings.storage
    alert_settings = settings.alerts

    account_store = AccountStore(
        create_storage(storage_settings.accounts_namespace, settings),
        audit_logger=audit_logger,
    )
    settings_store = SettingsStore(
        create_storage(storage_settings.settings_namespace, settings),
        default_alerts_enabled=alert_settings.default_enabled,
        audit_logger=audit_logger,
    )
    host = host or NotificationTray(audit_logger)

    notifier = BudgetNotifier(
        account_store=account_store,
        settings_store=settings_store,
        host=host,
        alert_settings=alert_settings,
        notification_settings=settings.notifications,
        audit_logger=audit_logger,
    )
    if start:
        notifier.start()

    return account_store, settings_store, notifier, host
