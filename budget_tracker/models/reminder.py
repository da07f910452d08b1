"""
Reminder Models for Budget Tracker

A reminder is a bill with a due date and time. The due-detection engine
flips `notified` once the bill falls due, and the snooze action defers it
for a while.

DESIGN DECISION: All datetimes in this module are naive local wall-clock
values. A bill "due at 09:00" is due at 09:00 wherever the user is, so we
never attach a timezone to the due-instant or to `snooze_until`.
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================

class NotificationSound(str, Enum):
    """
    Audio cue played when a reminder fires.

    DEFAULT leaves the sound to the platform notification itself.
    """
    DEFAULT = "default"
    BEEP = "beep"
    CHIME = "chime"
    VIBRATE = "vibrate"
    NONE = "none"


class AppVisibility(str, Enum):
    """Whether the application view is currently visible to the user."""
    FOREGROUND = "foreground"
    BACKGROUND = "background"


class PermissionState(str, Enum):
    """Platform notification permission."""
    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"


class DeliveryChannel(str, Enum):
    """Where a fired reminder was shown."""
    IN_APP = "in_app"       # Toast in the ActiveNotification set
    OS = "os"               # Platform notification
    AUDIO_ONLY = "audio_only"  # Background without permission


# =============================================================================
# CORE REMINDER MODEL
# =============================================================================

class Reminder(BaseModel):
    """
    A bill reminder.

    `notified` and `snooze_until` are owned by the engine and the snooze
    action. Everything else comes from the user's form.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Stable reminder ID, preserved across edits"
    )
    bill_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Name of the bill (e.g., Rent, Electricity)"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount due"
    )
    due_date: date = Field(
        ...,
        description="Calendar date the bill is due"
    )
    due_time: time = Field(
        ...,
        description="Local time of day the bill is due"
    )
    notification_sound: NotificationSound = Field(
        default=NotificationSound.DEFAULT,
        description="Audio cue to play when the reminder fires"
    )
    notified: bool = Field(
        default=False,
        description="Has the engine already alerted for this due-instant?"
    )
    snooze_until: Optional[datetime] = Field(
        default=None,
        description="Suppress alerts until this local instant"
    )

    @field_validator("snooze_until")
    @classmethod
    def to_local_wall_clock(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Convert a timezone-aware value to naive local time."""
        if v is not None and v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    @property
    def due_instant(self) -> datetime:
        """Combined due date and time, local wall-clock."""
        return datetime.combine(self.due_date, self.due_time)


# =============================================================================
# ENGINE RESULTS
# =============================================================================

class EvaluationResult(BaseModel):
    """
    Output of one due-detection pass.

    `updated` is the full reminder set to persist; `fired` lists the
    reminders that became due on this pass, as they were before marking.
    """

    updated: list[Reminder] = Field(default_factory=list)
    fired: list[Reminder] = Field(default_factory=list)

    @property
    def has_fired(self) -> bool:
        return bool(self.fired)


class RouteOutcome(BaseModel):
    """What the notification router did with one fired reminder."""

    reminder_id: UUID
    channel: DeliveryChannel
    os_notification_shown: bool = False
    audio_cue_played: bool = False
