"""Shared fixtures. No test touches real files outside tmp_path."""

import pytest

from budgetwatch.audit import AuditLogger
from budgetwatch.services.notifications import NotificationTray
from budgetwatch.services.storage import InMemoryKeyValueStore
from budgetwatch.stores import AccountStore, SettingsStore


class RecordingLogger:
    """Stands in for a structlog logger and keeps every call."""

    def __init__(self):
        self.records = []

    def _record(self, level, event, **kwargs):
        self.records.append((level, event, kwargs))

    def debug(self, event, **kwargs):
        self._record("debug", event, **kwargs)

    def info(self, event, **kwargs):
        self._record("info", event, **kwargs)

    def warning(self, event, **kwargs):
        self._record("warning", event, **kwargs)

    def error(self, event, **kwargs):
        self._record("error", event, **kwargs)

    def event_types(self, level=None):
        return [
            kwargs["event_type"]
            for lvl, _, kwargs in self.records
            if level is None or lvl == level
        ]


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def audit_logger(recording_logger):
    return AuditLogger(recording_logger)


@pytest.fixture
def account_storage():
    return InMemoryKeyValueStore()


@pytest.fixture
def settings_storage():
    return InMemoryKeyValueStore()


@pytest.fixture
def account_store(account_storage, audit_logger):
    return AccountStore(account_storage, audit_logger=audit_logger)


@pytest.fixture
def settings_store(settings_storage, audit_logger):
    return SettingsStore(settings_storage, audit_logger=audit_logger)


@pytest.fixture
def tray(audit_logger):
    return NotificationTray(audit_logger)
