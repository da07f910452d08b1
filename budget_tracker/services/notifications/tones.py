"""Audio cue table for each notification sound."""

from typing import NamedTuple

from budget_tracker.models.reminder import NotificationSound


class Tone(NamedTuple):
    frequency: float
    duration_seconds: float
    delay_seconds: float = 0.0


TONES: dict[NotificationSound, tuple[Tone, ...]] = {
    NotificationSound.BEEP: (Tone(880.0, 0.2),),
    NotificationSound.CHIME: (
        Tone(1046.5, 0.15),
        Tone(1396.9, 0.15, delay_seconds=0.15),
    ),
}

VIBRATION_PATTERN: list[int] = [200, 100, 200]


def tones_for(sound: NotificationSound) -> tuple[Tone, ...]:
    """Tones to synthesize for `sound`. Empty for default, vibrate and none."""
    return TONES.get(sound, ())
