"""
Console backends for notifications and audio.

Used by the standalone runner, where there is no desktop notification
service or sound device to talk to. Everything is reported through
structlog instead.
"""

import structlog

from budget_tracker.models.reminder import AppVisibility, PermissionState
from budget_tracker.services.notifications.interface import AudioBackend, NotificationBackend

logger = structlog.get_logger(__name__)


class LoggingNotificationBackend(NotificationBackend):
    """
    Logs notifications instead of showing them.

    Visibility and permission are plain attributes so a host can flip
    them (e.g. when a terminal window loses focus).
    """

    def __init__(
        self,
        visibility: AppVisibility = AppVisibility.BACKGROUND,
        permission: PermissionState = PermissionState.UNDETERMINED,
        grant_on_request: bool = True,
    ):
        self.current_visibility = visibility
        self.permission = permission
        self._grant_on_request = grant_on_request

    def permission_state(self) -> PermissionState:
        return self.permission

    def request_permission(self) -> PermissionState:
        if self.permission == PermissionState.UNDETERMINED:
            self.permission = (
                PermissionState.GRANTED if self._grant_on_request else PermissionState.DENIED
            )
        return self.permission

    def show(self, title: str, body: str, silent: bool) -> None:
        logger.info("os_notification", title=title, body=body, silent=silent)

    def visibility(self) -> AppVisibility:
        return self.current_visibility


class LoggingAudioBackend(AudioBackend):
    """Logs tones; vibration is unsupported and ignored."""

    def __init__(self, supports_vibration: bool = False):
        self._supports_vibration = supports_vibration

    def play_tone(
        self,
        frequency: float,
        duration_seconds: float,
        delay_seconds: float = 0.0,
    ) -> None:
        logger.info(
            "tone",
            frequency=frequency,
            duration_seconds=duration_seconds,
            delay_seconds=delay_seconds,
        )

    def vibrate(self, pattern: list[int]) -> None:
        if not self._supports_vibration:
            return
        logger.info("vibrate", pattern=pattern)
