"""Services package."""

from budget_tracker.services.notifications import (
    AudioBackend,
    LoggingAudioBackend,
    LoggingNotificationBackend,
    NotificationBackend,
)
from budget_tracker.services.storage import (
    CorruptDataError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    NotFoundError,
    ReminderRepository,
    StorageError,
    TransactionRepository,
)

__all__ = [
    # Notification services
    "AudioBackend",
    "LoggingAudioBackend",
    "LoggingNotificationBackend",
    "NotificationBackend",
    # Storage services
    "CorruptDataError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "NotFoundError",
    "ReminderRepository",
    "StorageError",
    "TransactionRepository",
]
