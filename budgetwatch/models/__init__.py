"""
Data Models Package

This package contains all Pydantic models used in budgetwatch.
All data flowing through the system must conform to these schemas.
"""

from budgetwatch.models.budget import (
    Account,
    AccountField,
    AggregateTotals,
    AlertTier,
    BudgetSnapshot,
)
from budgetwatch.models.notification import (
    Notification,
    NotificationChannel,
    NotificationImportance,
    NotificationPriority,
)
from budgetwatch.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Budget models
    "Account",
    "AccountField",
    "AggregateTotals",
    "AlertTier",
    "BudgetSnapshot",
    # Notification models
    "Notification",
    "NotificationChannel",
    "NotificationImportance",
    "NotificationPriority",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
