"""Notification and audio backends."""

from budget_tracker.services.notifications.interface import (
    AudioBackend,
    NotificationBackend,
)
from budget_tracker.services.notifications.logging_backend import (
    LoggingAudioBackend,
    LoggingNotificationBackend,
)
from budget_tracker.services.notifications.tones import (
    TONES,
    VIBRATION_PATTERN,
    Tone,
    tones_for,
)

__all__ = [
    "AudioBackend",
    "NotificationBackend",
    "LoggingAudioBackend",
    "LoggingNotificationBackend",
    "TONES",
    "VIBRATION_PATTERN",
    "Tone",
    "tones_for",
]
