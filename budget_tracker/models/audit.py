"""
Audit Models for Budget Tracker

Every state change to reminders and transactions, and every alert the
engine raises, is logged for audit purposes. This provides:
1. A history of when each bill was alerted, snoozed or rescheduled
2. Debugging information when an alert goes missing
3. Ability to reconstruct what the scheduler did on each tick

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Reminder lifecycle
    REMINDER_CREATED = "reminder_created"
    REMINDER_UPDATED = "reminder_updated"
    REMINDER_RESCHEDULED = "reminder_rescheduled"
    REMINDER_DELETED = "reminder_deleted"
    REMINDER_FIRED = "reminder_fired"
    REMINDER_SNOOZED = "reminder_snoozed"

    # Notification delivery
    NOTIFICATION_DELIVERED = "notification_delivered"
    NOTIFICATION_DISMISSED = "notification_dismissed"
    NOTIFICATION_DEGRADED = "notification_degraded"
    PERMISSION_REQUESTED = "permission_requested"

    # Transactions
    TRANSACTION_SAVED = "transaction_saved"
    TRANSACTION_DELETED = "transaction_deleted"

    # Persistence
    STORAGE_LOAD_FAILED = "storage_load_failed"
    SAVE_FAILED = "save_failed"

    # Scheduler
    SCHEDULER_STARTED = "scheduler_started"
    SCHEDULER_STOPPED = "scheduler_stopped"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'reminder', 'transaction')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - all events raised by one scheduler tick share an ID
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.reminder_fired(reminder_id, bill_name, correlation_id)
        event = AuditEventBuilder.reminder_snoozed(reminder_id, snooze_until)
    """

    @staticmethod
    def reminder_created(reminder_id: UUID, bill_name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_CREATED,
            entity_type="reminder",
            entity_id=reminder_id,
            description=f"Reminder created: {bill_name}",
            details={"bill_name": bill_name},
            is_user_action=True,
        )

    @staticmethod
    def reminder_updated(
        reminder_id: UUID,
        bill_name: str,
        rescheduled: bool,
    ) -> AuditEvent:
        if rescheduled:
            return AuditEvent(
                event_type=AuditEventType.REMINDER_RESCHEDULED,
                entity_type="reminder",
                entity_id=reminder_id,
                description=f"Reminder rescheduled to the future, alerting re-armed: {bill_name}",
                details={"bill_name": bill_name},
                is_user_action=True,
            )
        return AuditEvent(
            event_type=AuditEventType.REMINDER_UPDATED,
            entity_type="reminder",
            entity_id=reminder_id,
            description=f"Reminder updated: {bill_name}",
            details={"bill_name": bill_name},
            is_user_action=True,
        )

    @staticmethod
    def reminder_deleted(reminder_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_DELETED,
            entity_type="reminder",
            entity_id=reminder_id,
            description="Reminder deleted",
            is_user_action=True,
        )

    @staticmethod
    def reminder_fired(
        reminder_id: UUID,
        bill_name: str,
        due_instant: datetime,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_FIRED,
            entity_type="reminder",
            entity_id=reminder_id,
            correlation_id=correlation_id,
            description=f"Reminder due: {bill_name}",
            details={
                "bill_name": bill_name,
                "due_instant": due_instant.isoformat(),
            },
        )

    @staticmethod
    def reminder_snoozed(reminder_id: UUID, snooze_until: datetime) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_SNOOZED,
            entity_type="reminder",
            entity_id=reminder_id,
            description=f"Reminder snoozed until {snooze_until:%H:%M}",
            details={"snooze_until": snooze_until.isoformat()},
            is_user_action=True,
        )

    @staticmethod
    def notification_delivered(
        reminder_id: UUID,
        channel: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFICATION_DELIVERED,
            entity_type="reminder",
            entity_id=reminder_id,
            correlation_id=correlation_id,
            description=f"Notification delivered via {channel}",
            details={"channel": channel},
        )

    @staticmethod
    def notification_dismissed(reminder_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFICATION_DISMISSED,
            entity_type="reminder",
            entity_id=reminder_id,
            description="In-app notification dismissed",
            is_user_action=True,
        )

    @staticmethod
    def notification_degraded(
        reminder_id: UUID,
        permission: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFICATION_DEGRADED,
            severity=AuditSeverity.WARNING,
            entity_type="reminder",
            entity_id=reminder_id,
            correlation_id=correlation_id,
            description="App in background without notification permission, audio cue only",
            details={"permission": permission},
        )

    @staticmethod
    def permission_requested(result: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERMISSION_REQUESTED,
            description=f"Notification permission requested: {result}",
            details={"result": result},
        )

    @staticmethod
    def transaction_saved(
        transaction_id: UUID,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction saved: {transaction_type} {amount}",
            details={"type": transaction_type, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def storage_load_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Stored data under '{key}' unreadable, starting empty",
            error_message=error_message,
            details={"key": key},
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Could not persist '{key}'",
            error_message=error_message,
            details={"key": key},
        )

    @staticmethod
    def scheduler_started(interval_seconds: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEDULER_STARTED,
            description=f"Reminder checks every {interval_seconds:g}s",
            details={"interval_seconds": interval_seconds},
        )

    @staticmethod
    def scheduler_stopped() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEDULER_STOPPED,
            description="Reminder checks stopped",
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
