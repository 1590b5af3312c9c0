"""
Audit Models for budgetwatch

Every store mutation and every notifier decision is described by an
AuditEvent and written to the structured log. This provides:
1. Traceability of what changed and why a notification appeared
2. Debugging information when a stored value had to be recovered

Events are only logged, never persisted.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we log."""
    # Account store
    ACCOUNT_ADDED = "account_added"
    ACCOUNT_SAVED = "account_saved"
    ACCOUNTS_REPLACED = "accounts_replaced"
    ACCOUNT_DELETED = "account_deleted"
    FIELD_SET_FOR_ALL = "field_set_for_all"
    STORED_VALUE_RECOVERED = "stored_value_recovered"

    # Settings store
    ALERTS_TOGGLED = "alerts_toggled"

    # Notifier
    NOTIFIER_STARTED = "notifier_started"
    NOTIFIER_STOPPED = "notifier_stopped"
    SUMMARY_PUBLISHED = "summary_published"
    ALERT_PUBLISHED = "alert_published"
    ALERT_CLEARED = "alert_cleared"
    ALERT_TIER_CHANGED = "alert_tier_changed"

    # Notification host
    NOTIFICATION_SHOWN = "notification_shown"
    NOTIFICATION_CANCELLED = "notification_cancelled"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'settings', 'notification')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_saved(account_id, name)
        event = AuditEventBuilder.alert_published("over", "Over budget")
    """

    @staticmethod
    def account_added(account_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_ADDED,
            entity_type="account",
            entity_id=account_id,
            description=f"Account added: {name}",
            details={"name": name},
        )

    @staticmethod
    def account_saved(account_id: str, name: str, inserted: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_SAVED,
            entity_type="account",
            entity_id=account_id,
            description=f"Account {'inserted' if inserted else 'replaced'}: {name}",
            details={"name": name, "inserted": inserted},
        )

    @staticmethod
    def accounts_replaced(count: int, removed_ids: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_REPLACED,
            entity_type="account",
            description=f"Account list replaced with {count} accounts",
            details={"count": count, "removed_ids": removed_ids},
        )

    @staticmethod
    def account_deleted(account_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_DELETED,
            entity_type="account",
            entity_id=account_id,
            description="Account deleted",
        )

    @staticmethod
    def field_set_for_all(field: str, value: float, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FIELD_SET_FOR_ALL,
            entity_type="account",
            description=f"Set {field} to {value} on {count} accounts",
            details={"field": field, "value": value, "count": count},
        )

    @staticmethod
    def stored_value_recovered(
        key: str,
        raw_value: Any,
        fallback: Any,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORED_VALUE_RECOVERED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            entity_id=key,
            description=f"Unreadable stored value for {key}, using {fallback!r}",
            details={"raw_value": repr(raw_value), "fallback": fallback},
        )

    @staticmethod
    def alerts_toggled(enabled: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERTS_TOGGLED,
            entity_type="settings",
            description=f"Alerts {'enabled' if enabled else 'disabled'}",
            details={"enabled": enabled},
        )

    @staticmethod
    def notifier_started() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFIER_STARTED,
            entity_type="notifier",
            description="Budget notifier started",
        )

    @staticmethod
    def notifier_stopped() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFIER_STOPPED,
            entity_type="notifier",
            description="Budget notifier stopped",
        )

    @staticmethod
    def summary_published(text: str, spent: float, limit: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUMMARY_PUBLISHED,
            severity=AuditSeverity.DEBUG,
            entity_type="notification",
            description=text,
            details={"total_spent": spent, "total_limit": limit},
        )

    @staticmethod
    def alert_published(tier: str, message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERT_PUBLISHED,
            severity=AuditSeverity.WARNING,
            entity_type="notification",
            description=f"Budget alert: {message}",
            details={"tier": tier},
        )

    @staticmethod
    def alert_cleared(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERT_CLEARED,
            entity_type="notification",
            description=f"Budget alert cleared: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def alert_tier_changed(previous: Optional[str], current: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERT_TIER_CHANGED,
            entity_type="notifier",
            description=f"Alert tier changed from {previous} to {current}",
            details={"previous": previous, "current": current},
        )

    @staticmethod
    def notification_shown(
        notification_id: int,
        channel_id: str,
        body: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFICATION_SHOWN,
            severity=AuditSeverity.DEBUG,
            entity_type="notification",
            entity_id=str(notification_id),
            description=body,
            details={"channel_id": channel_id},
        )

    @staticmethod
    def notification_cancelled(notification_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFICATION_CANCELLED,
            severity=AuditSeverity.DEBUG,
            entity_type="notification",
            entity_id=str(notification_id),
            description="Notification cancelled",
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
