"""
Typed Collection Repositories

A repository owns one storage key and converts between the stored JSON
array and a list of pydantic models.

Loading never raises: a missing key is an empty collection, and so is an
unreadable one (logged and audited). Saving never raises either: a failed
write is reported and the caller keeps its in-memory state.
"""

from typing import TYPE_CHECKING, Generic, Optional, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from budget_tracker.models.audit import AuditEventBuilder
from budget_tracker.models.reminder import Reminder
from budget_tracker.models.transaction import Transaction
from budget_tracker.services.storage.interface import (
    KeyValueStore,
    StorageError,
    reminders_key,
    transactions_key,
)

if TYPE_CHECKING:
    from budget_tracker.audit.logger import AuditLogger

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class CollectionRepository(Generic[ModelT]):
    """Persists a list of `model` instances under a single key."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        model: type[ModelT],
        audit_logger: Optional["AuditLogger"] = None,
    ):
        self._store = store
        self._key = key
        self._adapter = TypeAdapter(list[model])
        self._audit_logger = audit_logger

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[ModelT]:
        """Load the collection; fall back to empty if it cannot be read."""
        try:
            raw = self._store.load(self._key, default=[])
            return self._adapter.validate_python(raw)
        except (StorageError, ValidationError) as e:
            logger.warning("collection_load_failed", key=self._key, error=str(e))
            if self._audit_logger:
                self._audit_logger.log(
                    AuditEventBuilder.storage_load_failed(self._key, str(e))
                )
            return []

    def save(self, items: list[ModelT]) -> bool:
        """
        Write the whole collection.

        Returns True if the write succeeded.
        """
        payload = self._adapter.dump_python(items, mode="json")
        try:
            self._store.save(self._key, payload)
            return True
        except StorageError as e:
            logger.error("collection_save_failed", key=self._key, error=str(e))
            if self._audit_logger:
                self._audit_logger.log(AuditEventBuilder.save_failed(self._key, str(e)))
            return False


class ReminderRepository(CollectionRepository[Reminder]):
    """A user's reminders."""

    def __init__(
        self,
        store: KeyValueStore,
        username: str,
        audit_logger: Optional["AuditLogger"] = None,
    ):
        super().__init__(store, reminders_key(username), Reminder, audit_logger)


class TransactionRepository(CollectionRepository[Transaction]):
    """A user's transactions."""

    def __init__(
        self,
        store: KeyValueStore,
        username: str,
        audit_logger: Optional["AuditLogger"] = None,
    ):
        super().__init__(store, transactions_key(username), Transaction, audit_logger)
