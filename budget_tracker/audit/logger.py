"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Complete traceability of alerts, snoozes and edits
2. Debugging capability when a bill alert goes missing
3. User can see history of their reminders

The audit logger:
- Is synchronous, like the rest of the reminder pipeline
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import threading
from typing import Optional
from uuid import UUID, uuid4

import structlog

from budget_tracker.models.audit import AuditEvent, AuditSeverity
from budget_tracker.services.storage.interface import KeyValueStore, StorageError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

AUDIT_LOG_KEY = "audit_log"


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The key-value store, as a capped append-only list (for history)
    """

    def __init__(
        self,
        storage: Optional[KeyValueStore] = None,
        limit: int = 500,
        key: str = AUDIT_LOG_KEY,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Store for persistence. If None, only logs locally.
            limit: Most recent events kept in storage.
            key: Storage key of the persisted audit list.
        """
        self._storage = storage
        self._limit = limit
        self._key = key
        self._lock = threading.Lock()
        self._logger = structlog.get_logger("budget_tracker.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage is None or self._limit <= 0:
            return True

        try:
            with self._lock:
                events = self._storage.load(self._key, default=[])
                if not isinstance(events, list):
                    events = []
                events.append(event.model_dump(mode="json"))
                self._storage.save(self._key, events[-self._limit:])
            return True
        except StorageError as e:
            # Log failure but don't raise
            self._logger.error(
                "audit_storage_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

    def recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Most recent persisted events, newest first.

        Unreadable entries are skipped.
        """
        if self._storage is None:
            return []
        try:
            raw = self._storage.load(self._key, default=[])
        except StorageError as e:
            self._logger.warning("audit_storage_unreadable", error=str(e))
            return []

        events = []
        for item in reversed(raw if isinstance(raw, list) else []):
            try:
                events.append(AuditEvent.model_validate(item))
            except ValueError:
                continue
            if len(events) >= limit:
                break
        return events


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a scheduler tick and pass it to every event
    raised while handling that tick.
    """
    return uuid4()
