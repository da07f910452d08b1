"""
Notification and Audio Backend Interfaces

DESIGN DECISION: The router never talks to a concrete notification or
audio API. It only sees these two narrow capabilities, so tests can
record calls and a runner can print them instead.
"""

from abc import ABC, abstractmethod

from budget_tracker.models.reminder import AppVisibility, PermissionState


class NotificationBackend(ABC):
    """Platform notifications and application visibility."""

    @abstractmethod
    def permission_state(self) -> PermissionState:
        """Current notification permission."""
        pass

    @abstractmethod
    def request_permission(self) -> PermissionState:
        """
        Ask the user for notification permission.

        Returns:
            The permission state after the request
        """
        pass

    @abstractmethod
    def show(self, title: str, body: str, silent: bool) -> None:
        """Show one OS-level notification."""
        pass

    @abstractmethod
    def visibility(self) -> AppVisibility:
        """Whether the application is in the foreground."""
        pass


class AudioBackend(ABC):
    """Tone playback and device vibration."""

    @abstractmethod
    def play_tone(
        self,
        frequency: float,
        duration_seconds: float,
        delay_seconds: float = 0.0,
    ) -> None:
        """Play a sine tone, optionally starting after a delay."""
        pass

    @abstractmethod
    def vibrate(self, pattern: list[int]) -> None:
        """
        Vibrate the device.

        `pattern` alternates on/off durations in milliseconds.
        Must be a silent no-op on devices without vibration.
        """
        pass
