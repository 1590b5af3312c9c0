"""
Settings Store

Holds the user's alerts on/off switch under the "alerts_enabled" key.
Until the user toggles it, the configured default applies.
"""

import threading
from typing import Callable, Optional

from budgetwatch.audit import AuditLogger
from budgetwatch.services.storage import KeyValueStoreInterface
from budgetwatch.stores.observable import ObservableValue


KEY_ALERTS_ENABLED = "alerts_enabled"


class SettingsStore:
    """Persistent, observable user settings."""

    def __init__(
        self,
        storage: KeyValueStoreInterface,
        default_alerts_enabled: bool = True,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._default_alerts_enabled = default_alerts_enabled
        self._audit_logger = audit_logger
        self._lock = threading.RLock()
        self._alerts_enabled = ObservableValue(self._load_alerts_enabled())

    def is_alerts_enabled(self) -> bool:
        return self._alerts_enabled.value

    def set_alerts_enabled(self, enabled: bool) -> None:
        """Persist the switch, then publish it."""
        enabled = bool(enabled)
        with self._lock:
            self._storage.commit({KEY_ALERTS_ENABLED: enabled})

            if self._audit_logger:
                self._audit_logger.log_alerts_toggled(enabled)
            self._alerts_enabled.publish(enabled)

    def subscribe(
        self,
        callback: Callable[[bool], None],
        replay: bool = True,
    ) -> Callable[[], None]:
        """Observe the alerts switch. Returns an unsubscribe function."""
        return self._alerts_enabled.subscribe(callback, replay=replay)

    def unsubscribe(self, callback: Callable[[bool], None]) -> None:
        self._alerts_enabled.unsubscribe(callback)

    def _load_alerts_enabled(self) -> bool:
        raw = self._storage.get(KEY_ALERTS_ENABLED)
        if raw is None:
            return self._default_alerts_enabled
        if not isinstance(raw, bool):
            if self._audit_logger:
                self._audit_logger.log_value_recovered(
                    key=KEY_ALERTS_ENABLED,
                    raw_value=raw,
                    fallback=self._default_alerts_enabled,
                )
            return self._default_alerts_enabled
        return raw
