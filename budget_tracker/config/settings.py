"""
Configuration Management for Budget Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Tuning knobs such as the polling interval and snooze length live here
rather than as constants scattered through the engine.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReminderSettings(BaseSettings):
    """Due-detection and notification configuration."""

    model_config = SettingsConfigDict(
        env_prefix="REMINDER_",
        extra="ignore"
    )

    poll_interval_seconds: float = Field(
        default=30.0,
        ge=1.0,
        description="How often the scheduler re-evaluates reminders"
    )
    snooze_minutes: int = Field(
        default=10,
        ge=1,
        le=24 * 60,
        description="Length of the snooze window"
    )
    notification_title: str = Field(
        default="Bill Reminder",
        min_length=1,
        description="Title of OS-level notifications"
    )


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        extra="ignore"
    )

    data_dir: str = Field(
        default="data",
        description="Directory holding one JSON file per storage key"
    )
    audit_log_limit: int = Field(
        default=500,
        ge=0,
        description="Maximum audit events kept in storage (0 disables persistence)"
    )

    @field_validator('data_dir')
    @classmethod
    def validate_data_dir(cls, v: str) -> str:
        """Reject paths that point at an existing regular file."""
        if Path(v).is_file():
            raise ValueError(f"Storage data_dir is a file, not a directory: {v}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Symbol used when formatting amounts"
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
    def reminders(self) -> ReminderSettings:
        return ReminderSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

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
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus `<name>_error`
    entries for the sections that failed. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("reminders", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
