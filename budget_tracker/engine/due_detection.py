"""
Due-Detection Engine

Decides which reminders have newly become due at a given instant.

DESIGN DECISION: `evaluate` is a pure function over a snapshot. It takes
the reminder list and "now", and returns the list to persist plus the
reminders to alert on. It does not read the clock, touch storage, or
raise on ordinary outcomes ("nothing due" is an empty `fired` list).

Because the scheduler polls instead of arming one timer per reminder,
reminders may be added, edited or deleted between ticks without any
timer bookkeeping. The cost is detection latency of up to one poll
interval.

A reminder due long ago (e.g. while the app was closed) fires exactly
once on the next evaluation. Missed intervals are not replayed.
"""

from datetime import datetime

from budget_tracker.models.reminder import EvaluationResult, Reminder


def is_snoozed(reminder: Reminder, now: datetime) -> bool:
    """True while an active snooze window suppresses the reminder."""
    return reminder.snooze_until is not None and now < reminder.snooze_until


def is_newly_due(reminder: Reminder, now: datetime) -> bool:
    """
    True iff the reminder should alert now.

    The due-instant has passed, it has not been alerted yet, and no
    snooze is active.
    """
    return (
        reminder.due_instant <= now
        and not reminder.notified
        and not is_snoozed(reminder, now)
    )


def evaluate(reminders: list[Reminder], now: datetime) -> EvaluationResult:
    """
    Run one due-detection pass.

    Newly-due reminders are returned in `fired` unchanged and appear in
    `updated` with `notified=True`. All other reminders pass through to
    `updated` as the same objects, in the same order.

    Idempotent: evaluating `updated` again at the same `now` fires nothing.
    """
    updated: list[Reminder] = []
    fired: list[Reminder] = []

    for reminder in reminders:
        if is_newly_due(reminder, now):
            fired.append(reminder)
            updated.append(reminder.model_copy(update={"notified": True}))
        else:
            updated.append(reminder)

    return EvaluationResult(updated=updated, fired=fired)
