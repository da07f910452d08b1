"""
Reminder edit reconciliation and the snooze action.

Both mutate the engine-owned sub-state of a reminder (`notified` and
`snooze_until`) in response to a user action.
"""

from datetime import datetime, timedelta
from uuid import UUID

from budget_tracker.models.reminder import Reminder

DEFAULT_SNOOZE_MINUTES = 10


def is_rescheduled(existing: Reminder, submitted: Reminder, now: datetime) -> bool:
    """
    True when an edit moves the due-instant to a new, future moment.

    Any change of date or time counts, including moving the bill earlier,
    as long as the new due-instant is strictly after `now`.
    """
    changed = (
        existing.due_date != submitted.due_date
        or existing.due_time != submitted.due_time
    )
    return changed and submitted.due_instant > now


def reconcile_edit(existing: Reminder, submitted: Reminder, now: datetime) -> Reminder:
    """
    Merge a submitted edit into an existing reminder.

    The user-editable fields come from `submitted`; the id always comes
    from `existing`. A reschedule to the future re-arms alerting by
    clearing `notified` and `snooze_until`. Otherwise both keep their
    existing values, so editing e.g. the amount of an already-alerted
    bill does not make it alert again.
    """
    if is_rescheduled(existing, submitted, now):
        notified, snooze_until = False, None
    else:
        notified, snooze_until = existing.notified, existing.snooze_until

    return submitted.model_copy(update={
        "id": existing.id,
        "notified": notified,
        "snooze_until": snooze_until,
    })


def snooze(
    reminders: list[Reminder],
    reminder_id: UUID,
    now: datetime,
    minutes: int = DEFAULT_SNOOZE_MINUTES,
) -> list[Reminder]:
    """
    Snooze one reminder for `minutes`.

    Sets `snooze_until = now + minutes` and clears `notified`, so the
    snooze window is the only thing holding the alert back; once it
    elapses the reminder is due again on the next evaluation.

    Unknown ids leave the list unchanged.

    Raises:
        ValueError: If `minutes` is less than 1
    """
    if minutes < 1:
        raise ValueError(f"Snooze length must be at least 1 minute, got {minutes}")
    snooze_until = now + timedelta(minutes=minutes)
    return [
        r.model_copy(update={"snooze_until": snooze_until, "notified": False})
        if r.id == reminder_id
        else r
        for r in reminders
    ]
