"""
Shared fixtures for Budget Tracker tests.

No real notification service, sound device or wall clock is used: the
backends below record what they were asked to do, and time only moves
when a test advances the ManualClock.
"""

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from budget_tracker.audit import AuditLogger
from budget_tracker.clock import ManualClock
from budget_tracker.engine import ActiveNotifications, NotificationRouter
from budget_tracker.models.reminder import (
    AppVisibility,
    NotificationSound,
    PermissionState,
    Reminder,
)
from budget_tracker.models.transaction import Transaction, TransactionType
from budget_tracker.services.notifications import AudioBackend, NotificationBackend
from budget_tracker.services.storage import InMemoryKeyValueStore


class RecordingNotificationBackend(NotificationBackend):
    """Records OS notifications instead of showing them."""

    def __init__(
        self,
        visibility: AppVisibility = AppVisibility.BACKGROUND,
        permission: PermissionState = PermissionState.GRANTED,
        request_result: PermissionState = PermissionState.GRANTED,
    ):
        self.current_visibility = visibility
        self.permission = permission
        self.request_result = request_result
        self.permission_requests = 0
        self.shown: list[dict] = []

    def permission_state(self) -> PermissionState:
        return self.permission

    def request_permission(self) -> PermissionState:
        self.permission_requests += 1
        self.permission = self.request_result
        return self.permission

    def show(self, title: str, body: str, silent: bool) -> None:
        self.shown.append({"title": title, "body": body, "silent": silent})

    def visibility(self) -> AppVisibility:
        return self.current_visibility


class RecordingAudioBackend(AudioBackend):
    """Records tones and vibrations."""

    def __init__(self):
        self.tones: list[tuple[float, float, float]] = []
        self.vibrations: list[list[int]] = []

    def play_tone(self, frequency, duration_seconds, delay_seconds=0.0) -> None:
        self.tones.append((frequency, duration_seconds, delay_seconds))

    def vibrate(self, pattern) -> None:
        self.vibrations.append(list(pattern))


class BrokenAudioBackend(AudioBackend):
    """An audio device that is gone."""

    def play_tone(self, frequency, duration_seconds, delay_seconds=0.0) -> None:
        raise RuntimeError("audio device unavailable")

    def vibrate(self, pattern) -> None:
        raise RuntimeError("vibration unavailable")


@pytest.fixture
def clock():
    return ManualClock(datetime(2024, 3, 1, 8, 0))


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def notifications():
    return RecordingNotificationBackend()


@pytest.fixture
def notification_backend():
    """The recording backend class, for tests that need a custom permission or a failing subclass."""
    return RecordingNotificationBackend


@pytest.fixture
def audio():
    return RecordingAudioBackend()


@pytest.fixture
def broken_audio():
    return BrokenAudioBackend()


@pytest.fixture
def audit_logger(store):
    return AuditLogger(storage=store, limit=100)


@pytest.fixture
def router(notifications, audio, audit_logger):
    return NotificationRouter(
        notifications=notifications,
        audio=audio,
        active=ActiveNotifications(),
        audit_logger=audit_logger,
    )


@pytest.fixture
def make_reminder():
    """Factory for reminders due 2024-03-01 09:00 unless overridden."""

    def _make(**overrides) -> Reminder:
        fields = {
            "bill_name": "Electricity",
            "amount": Decimal("120.50"),
            "due_date": date(2024, 3, 1),
            "due_time": time(9, 0),
            "notification_sound": NotificationSound.BEEP,
        }
        fields.update(overrides)
        return Reminder(**fields)

    return _make


@pytest.fixture
def make_transaction():
    """Factory for transactions dated 2024-03-10 unless overridden."""

    def _make(**overrides) -> Transaction:
        fields = {
            "type": TransactionType.EXPENSE,
            "category": "Groceries",
            "amount": Decimal("40"),
            "date": date(2024, 3, 10),
        }
        fields.update(overrides)
        return Transaction(**fields)

    return _make
