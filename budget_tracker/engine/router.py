"""
Notification Router

Decides how a fired reminder reaches the user:
- Foreground: an in-app toast (the ActiveNotifications set)
- Background with permission: one OS-level notification
- Background without permission: the audio cue alone

The audio cue plays in every case.

DESIGN DECISION: Delivery is fire-and-forget. A backend that raises
(no sound device, notification service gone) is logged and skipped; it
never stops the remaining reminders of a tick from being routed.
"""

from collections import OrderedDict
from typing import Iterator, Optional
from uuid import UUID

import structlog

from budget_tracker.audit import AuditLogger
from budget_tracker.models.audit import AuditEventBuilder
from budget_tracker.models.reminder import (
    AppVisibility,
    DeliveryChannel,
    NotificationSound,
    PermissionState,
    Reminder,
    RouteOutcome,
)
from budget_tracker.services.notifications import (
    VIBRATION_PATTERN,
    AudioBackend,
    NotificationBackend,
    tones_for,
)

logger = structlog.get_logger(__name__)


class ActiveNotifications:
    """
    Reminders currently shown as in-app toasts.

    In-memory only. Keyed by reminder id: adding a reminder that is
    already shown replaces it (moving it to the end) instead of
    duplicating it.
    """

    def __init__(self):
        self._items: "OrderedDict[UUID, Reminder]" = OrderedDict()

    def add(self, reminder: Reminder) -> None:
        self._items.pop(reminder.id, None)
        self._items[reminder.id] = reminder

    def remove(self, reminder_id: UUID) -> bool:
        """Remove a toast. Returns False if it was not shown."""
        return self._items.pop(reminder_id, None) is not None

    def __contains__(self, reminder_id: object) -> bool:
        return reminder_id in self._items

    def __iter__(self) -> Iterator[Reminder]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)


class NotificationRouter:
    """
    Routes fired reminders to the right channel and plays audio cues.
    """

    def __init__(
        self,
        notifications: NotificationBackend,
        audio: AudioBackend,
        active: Optional[ActiveNotifications] = None,
        audit_logger: Optional[AuditLogger] = None,
        title: str = "Bill Reminder",
        currency_symbol: str = "$",
    ):
        self._notifications = notifications
        self._audio = audio
        self._active = active if active is not None else ActiveNotifications()
        self._audit_logger = audit_logger
        self._title = title
        self._currency_symbol = currency_symbol

    @property
    def active(self) -> ActiveNotifications:
        return self._active

    def ensure_permission(self) -> PermissionState:
        """
        Ask for notification permission once, if it was never requested.

        Call at startup. A denial is not an error: background alerts
        simply fall back to the audio cue.
        """
        state = self._permission_state()
        if state != PermissionState.UNDETERMINED:
            return state

        try:
            state = self._notifications.request_permission()
        except Exception as e:
            logger.warning("permission_request_failed", error=str(e))
            return PermissionState.UNDETERMINED

        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.permission_requested(state.value))
        return state

    def visibility(self) -> AppVisibility:
        """
        Current app visibility.

        Falls back to FOREGROUND if the backend fails, so the alert at
        least lands in the in-app toast list.
        """
        try:
            return self._notifications.visibility()
        except Exception as e:
            logger.warning("visibility_check_failed", error=str(e))
            return AppVisibility.FOREGROUND

    def notification_body(self, reminder: Reminder) -> str:
        """e.g. "Rent for $1250.00 is due!" (two decimals, no separators)"""
        return f"{reminder.bill_name} for {self._currency_symbol}{reminder.amount:.2f} is due!"

    def play_cue(self, sound: NotificationSound) -> bool:
        """
        Play the audio cue for `sound`.

        Returns True if a tone or vibration was handed to the backend.
        DEFAULT and NONE synthesize nothing.
        """
        tones = tones_for(sound)
        try:
            for tone in tones:
                self._audio.play_tone(
                    tone.frequency,
                    tone.duration_seconds,
                    delay_seconds=tone.delay_seconds,
                )
            if sound == NotificationSound.VIBRATE:
                self._audio.vibrate(list(VIBRATION_PATTERN))
                return True
        except Exception as e:
            logger.warning("audio_cue_failed", sound=sound.value, error=str(e))
            return False
        return bool(tones)

    def route(
        self,
        reminder: Reminder,
        visibility: AppVisibility,
        correlation_id: Optional[UUID] = None,
    ) -> RouteOutcome:
        """Deliver one fired reminder."""
        audio_played = self.play_cue(reminder.notification_sound)

        if visibility == AppVisibility.FOREGROUND:
            self._active.add(reminder)
            outcome = RouteOutcome(
                reminder_id=reminder.id,
                channel=DeliveryChannel.IN_APP,
                audio_cue_played=audio_played,
            )
        else:
            outcome = self._route_background(reminder, audio_played, correlation_id)

        if self._audit_logger and outcome.channel != DeliveryChannel.AUDIO_ONLY:
            self._audit_logger.log(AuditEventBuilder.notification_delivered(
                reminder_id=reminder.id,
                channel=outcome.channel.value,
                correlation_id=correlation_id,
            ))
        return outcome

    def _route_background(
        self,
        reminder: Reminder,
        audio_played: bool,
        correlation_id: Optional[UUID],
    ) -> RouteOutcome:
        permission = self._permission_state()
        if permission == PermissionState.GRANTED:
            try:
                self._notifications.show(
                    self._title,
                    self.notification_body(reminder),
                    silent=reminder.notification_sound != NotificationSound.DEFAULT,
                )
                return RouteOutcome(
                    reminder_id=reminder.id,
                    channel=DeliveryChannel.OS,
                    os_notification_shown=True,
                    audio_cue_played=audio_played,
                )
            except Exception as e:
                logger.warning(
                    "os_notification_failed",
                    reminder_id=str(reminder.id),
                    error=str(e),
                )

        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.notification_degraded(
                reminder_id=reminder.id,
                permission=permission.value,
                correlation_id=correlation_id,
            ))
        return RouteOutcome(
            reminder_id=reminder.id,
            channel=DeliveryChannel.AUDIO_ONLY,
            audio_cue_played=audio_played,
        )

    def _permission_state(self) -> PermissionState:
        try:
            return self._notifications.permission_state()
        except Exception as e:
            logger.warning("permission_state_failed", error=str(e))
            return PermissionState.DENIED
