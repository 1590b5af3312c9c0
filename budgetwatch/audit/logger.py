"""
Audit Logger

Every store mutation and notifier decision is logged as a structured
event. This provides:
1. Traceability of what changed
2. Debugging capability when notifications look wrong
3. Visibility into stored values that had to be recovered

The audit logger only writes to the local structured log. It never
persists events.
"""

import logging
from typing import Any, Optional

import structlog

from budgetwatch.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route the structured log to stderr at the given level.

    structlog filters through the stdlib logger, so the stdlib level
    decides what gets written.
    """
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("budgetwatch").setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Maps each event's severity onto the matching log method.
    """

    def __init__(self, logger: Optional[Any] = None):
        """
        Initialize audit logger.

        Args:
            logger: structlog-compatible logger.
                    If None, the "budgetwatch" structlog logger is used.
        """
        self._logger = logger or structlog.get_logger("budgetwatch")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity is AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity is AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity is AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_account_added(self, account_id: str, name: str) -> None:
        self.log(AuditEventBuilder.account_added(account_id=account_id, name=name))

    def log_account_saved(self, account_id: str, name: str, inserted: bool) -> None:
        self.log(AuditEventBuilder.account_saved(
            account_id=account_id,
            name=name,
            inserted=inserted,
        ))

    def log_accounts_replaced(self, count: int, removed_ids: list[str]) -> None:
        self.log(AuditEventBuilder.accounts_replaced(count=count, removed_ids=removed_ids))

    def log_account_deleted(self, account_id: str) -> None:
        self.log(AuditEventBuilder.account_deleted(account_id=account_id))

    def log_field_set_for_all(self, field: str, value: float, count: int) -> None:
        self.log(AuditEventBuilder.field_set_for_all(field=field, value=value, count=count))

    def log_value_recovered(self, key: str, raw_value: Any, fallback: Any) -> None:
        """Log that a stored value was unreadable and a default was used."""
        self.log(AuditEventBuilder.stored_value_recovered(
            key=key,
            raw_value=raw_value,
            fallback=fallback,
        ))

    def log_alerts_toggled(self, enabled: bool) -> None:
        self.log(AuditEventBuilder.alerts_toggled(enabled=enabled))

    def log_notifier_started(self) -> None:
        self.log(AuditEventBuilder.notifier_started())

    def log_notifier_stopped(self) -> None:
        self.log(AuditEventBuilder.notifier_stopped())

    def log_summary_published(self, text: str, spent: float, limit: float) -> None:
        self.log(AuditEventBuilder.summary_published(text=text, spent=spent, limit=limit))

    def log_alert_published(self, tier: str, message: str) -> None:
        self.log(AuditEventBuilder.alert_published(tier=tier, message=message))

    def log_alert_cleared(self, reason: str) -> None:
        self.log(AuditEventBuilder.alert_cleared(reason=reason))

    def log_alert_tier_changed(self, previous: Optional[str], current: str) -> None:
        self.log(AuditEventBuilder.alert_tier_changed(previous=previous, current=current))

    def log_notification_shown(self, notification_id: int, channel_id: str, body: str) -> None:
        self.log(AuditEventBuilder.notification_shown(
            notification_id=notification_id,
            channel_id=channel_id,
            body=body,
        ))

    def log_notification_cancelled(self, notification_id: int) -> None:
        self.log(AuditEventBuilder.notification_cancelled(notification_id=notification_id))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
