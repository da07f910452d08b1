"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract key-value interface for storage.
This allows us to:
1. Keep the reminder engine free of any global storage access
2. Use in-memory storage for testing
3. Swap the JSON file backend for something else later

The interface is intentionally tiny: the whole application persists a
handful of JSON arrays under per-user keys.
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """
    Abstract interface for key-value storage.

    Values are JSON-compatible (dicts, lists, strings, numbers, bools, None).
    Both operations are synchronous.
    """

    @abstractmethod
    def load(self, key: str, default: Any = None) -> Any:
        """
        Load the value stored under `key`.

        Args:
            key: Storage key
            default: Returned when nothing is stored under `key`

        Returns:
            The stored value, or `default` if the key is missing

        Raises:
            CorruptDataError: If a value exists but cannot be decoded
        """
        pass

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """
        Store `value` under `key`, replacing any previous value.

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class CorruptDataError(StorageError):
    """A stored value exists but cannot be decoded."""
    pass


def reminders_key(username: str) -> str:
    """Storage key for a user's reminders."""
    return f"reminders_{username}"


def transactions_key(username: str) -> str:
    """Storage key for a user's transactions."""
    return f"transactions_{username}"
