"""
Storage Services Package

Provides the key-value store interface, its implementations, and the
typed repositories built on top of it.
"""

from budget_tracker.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    NotFoundError,
    StorageError,
    reminders_key,
    transactions_key,
)
from budget_tracker.services.storage.memory import InMemoryKeyValueStore
from budget_tracker.services.storage.json_file import JsonFileKeyValueStore
from budget_tracker.services.storage.repository import (
    CollectionRepository,
    ReminderRepository,
    TransactionRepository,
)

__all__ = [
    # Interface
    "KeyValueStore",
    "reminders_key",
    "transactions_key",
    # Exceptions
    "CorruptDataError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Repositories
    "CollectionRepository",
    "ReminderRepository",
    "TransactionRepository",
]
