"""Audit logging package."""

from budgetwatch.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
