"""
Tests for edit reconciliation and the snooze action.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from budget_tracker.engine import evaluate, is_rescheduled, reconcile_edit, snooze


NOW = datetime(2024, 3, 1, 9, 30)
SNOOZED_UNTIL = datetime(2024, 3, 1, 9, 40)


class TestReconcileEdit:
    """Reset-on-reschedule rules."""

    def test_reschedule_to_future_resets_status(self, make_reminder):
        """Moving the due time into the future re-arms alerting."""
        existing = make_reminder(notified=True, snooze_until=SNOOZED_UNTIL)
        submitted = make_reminder(due_time=time(18, 0))

        merged = reconcile_edit(existing, submitted, NOW)

        assert merged.notified is False
        assert merged.snooze_until is None
        assert merged.due_time == time(18, 0)
        assert merged.id == existing.id

    def test_reschedule_date_to_future_resets_status(self, make_reminder):
        """A date change counts the same as a time change."""
        existing = make_reminder(notified=True)
        submitted = make_reminder(due_date=date(2024, 4, 1))

        assert reconcile_edit(existing, submitted, NOW).notified is False

    def test_unrelated_edit_keeps_status(self, make_reminder):
        """Editing the amount of an alerted bill leaves it alerted."""
        existing = make_reminder(notified=True, snooze_until=SNOOZED_UNTIL)
        submitted = make_reminder(amount=Decimal("999"), bill_name="Power")

        merged = reconcile_edit(existing, submitted, NOW)

        assert merged.notified is True
        assert merged.snooze_until == SNOOZED_UNTIL
        assert merged.amount == Decimal("999")
        assert merged.bill_name == "Power"

    def test_reschedule_into_past_keeps_status(self, make_reminder):
        """A changed due-instant that is still in the past does not reset."""
        existing = make_reminder(notified=True)
        submitted = make_reminder(due_time=time(7, 0))

        merged = reconcile_edit(existing, submitted, NOW)

        assert merged.notified is True
        assert merged.due_time == time(7, 0)

    def test_reschedule_to_exactly_now_keeps_status(self, make_reminder):
        """The new due-instant must be strictly in the future."""
        existing = make_reminder(notified=True)
        submitted = make_reminder(due_time=time(9, 30))

        assert not is_rescheduled(existing, submitted, NOW)
        assert reconcile_edit(existing, submitted, NOW).notified is True

    def test_earlier_but_future_resets(self, make_reminder):
        """Moving a future bill earlier, still in the future, also resets."""
        existing = make_reminder(
            due_date=date(2024, 3, 20),
            notified=False,
            snooze_until=SNOOZED_UNTIL,
        )
        submitted = make_reminder(due_date=date(2024, 3, 10))

        merged = reconcile_edit(existing, submitted, NOW)

        assert merged.snooze_until is None

    def test_id_comes_from_existing(self, make_reminder):
        """The submitted record's id never replaces the stored one."""
        existing = make_reminder()
        submitted = make_reminder(id=uuid4())

        assert reconcile_edit(existing, submitted, NOW).id == existing.id

    def test_rescheduled_reminder_fires_again(self, make_reminder):
        """After a reschedule the engine alerts at the new due-instant."""
        existing = evaluate([make_reminder()], NOW).updated[0]
        merged = reconcile_edit(existing, make_reminder(due_time=time(10, 0)), NOW)

        assert evaluate([merged], datetime(2024, 3, 1, 9, 59)).fired == []
        assert len(evaluate([merged], datetime(2024, 3, 1, 10, 0)).fired) == 1


class TestSnooze:
    """The snooze action."""

    def test_sets_window_and_clears_notified(self, make_reminder):
        """snooze() opens a ten minute window and clears notified."""
        reminder = make_reminder(notified=True)

        [snoozed] = snooze([reminder], reminder.id, NOW)

        assert snoozed.snooze_until == NOW + timedelta(minutes=10)
        assert snoozed.notified is False

    def test_custom_length(self, make_reminder):
        reminder = make_reminder()
        [snoozed] = snooze([reminder], reminder.id, NOW, minutes=3)
        assert snoozed.snooze_until == NOW + timedelta(minutes=3)

    @pytest.mark.parametrize("minutes", [0, -5])
    def test_rejects_non_positive_length(self, make_reminder, minutes):
        """The snooze window always ends in the future."""
        reminder = make_reminder()
        with pytest.raises(ValueError):
            snooze([reminder], reminder.id, NOW, minutes=minutes)

    def test_only_target_changes(self, make_reminder):
        """Other reminders are untouched."""
        target = make_reminder(notified=True)
        other = make_reminder(bill_name="Rent", notified=True)

        result = snooze([target, other], target.id, NOW)

        assert result[1] is other
        assert result[1].notified is True

    def test_unknown_id_is_noop(self, make_reminder):
        reminder = make_reminder(notified=True)
        assert snooze([reminder], uuid4(), NOW) == [reminder]

    def test_snoozed_reminder_refires_after_window(self, make_reminder):
        """Once the window elapses the reminder fires on the next evaluation."""
        fired = evaluate([make_reminder()], datetime(2024, 3, 1, 9, 0))
        reminder = fired.updated[0]

        snoozed = snooze([reminder], reminder.id, datetime(2024, 3, 1, 9, 0))

        assert evaluate(snoozed, datetime(2024, 3, 1, 9, 5)).fired == []
        assert len(evaluate(snoozed, datetime(2024, 3, 1, 9, 11)).fired) == 1
