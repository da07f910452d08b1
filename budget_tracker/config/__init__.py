"""Configuration package."""

from budget_tracker.config.settings import (
    AppSettings,
    ReminderSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ReminderSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
