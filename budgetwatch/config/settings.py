"""
Configuration Management for budgetwatch

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here, grouped by concern, and every
group can be overridden with environment variables or a .env file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value storage backend configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGETWATCH_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["json", "memory"] = Field(
        default="json",
        description="Which key-value backend to use"
    )
    data_dir: Path = Field(
        default=Path(".budgetwatch"),
        description="Directory holding one JSON file per namespace"
    )

    # Namespaces (one file each with the json backend)
    accounts_namespace: str = Field(
        default="budget_prefs",
        min_length=1,
        description="Namespace for account records"
    )
    settings_namespace: str = Field(
        default="budget_settings",
        min_length=1,
        description="Namespace for user settings"
    )

    def namespace_path(self, namespace: str) -> Path:
        """Get the file backing a namespace."""
        return self.data_dir.expanduser() / f"{namespace}.json"


class AlertSettings(BaseSettings):
    """Budget alert thresholds."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGETWATCH_ALERTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    close_ratio: float = Field(
        default=0.9,
        ge=0.0,
        description="Spent/limit ratio at which the 'close' alert starts"
    )
    over_ratio: float = Field(
        default=1.0,
        ge=0.0,
        description="Spent/limit ratio at which the 'over' alert starts"
    )
    default_enabled: bool = Field(
        default=True,
        description="Whether alerts are on before the user ever toggles them"
    )

    @model_validator(mode='after')
    def validate_bands(self) -> 'AlertSettings':
        """The close band must start at or below the over band."""
        if self.close_ratio > self.over_ratio:
            raise ValueError("close_ratio cannot be greater than over_ratio")
        return self


class NotificationSettings(BaseSettings):
    """Notification channel and identifier configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGETWATCH_NOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    summary_channel_id: str = Field(default="budget_channel")
    alert_channel_id: str = Field(default="budget_alert_channel")
    summary_notification_id: int = Field(default=1001)
    alert_notification_id: int = Field(default=1002)
    summary_title: str = Field(default="Budget Manager")
    alert_title: str = Field(default="Budget Alert")

    @model_validator(mode='after')
    def validate_distinct_ids(self) -> 'NotificationSettings':
        """Summary and alert must never replace each other."""
        if self.summary_notification_id == self.alert_notification_id:
            raise ValueError("Summary and alert notification ids must differ")
        return self


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGETWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum level for the structured log"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def alerts(self) -> AlertSettings:
        return AlertSettings()

    @property
    def notifications(self) -> NotificationSettings:
        return NotificationSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings groups.

    Returns a dict of {group_name: is_valid}, plus a
    "<group_name>_error" entry for each group that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "alerts", "notifications", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
