"""
Tests for the due-detection engine.

evaluate() is pure, so these tests only build reminder lists and pick
instants; no clock or scheduler is involved.
"""

from datetime import date, datetime, time, timedelta, timezone

from budget_tracker.engine import evaluate, is_newly_due, is_snoozed


NINE = datetime(2024, 3, 1, 9, 0)


class TestEvaluate:
    """Core evaluate() behaviour."""

    def test_due_reminder_fires_and_is_marked(self, make_reminder):
        """A reminder whose due-instant has passed fires once and is marked notified."""
        reminder = make_reminder()

        result = evaluate([reminder], NINE + timedelta(minutes=5))

        assert [r.id for r in result.fired] == [reminder.id]
        assert result.fired[0].notified is False
        assert result.updated[0].notified is True
        assert result.updated[0].id == reminder.id

    def test_fires_exactly_at_due_instant(self, make_reminder):
        """due_instant <= now is inclusive."""
        result = evaluate([make_reminder()], NINE)
        assert len(result.fired) == 1

    def test_no_premature_fire(self, make_reminder):
        """A reminder due in the future never fires."""
        result = evaluate([make_reminder()], NINE - timedelta(seconds=1))
        assert result.fired == []
        assert result.updated[0].notified is False

    def test_already_notified_does_not_fire(self, make_reminder):
        """notified=True suppresses the alert."""
        result = evaluate([make_reminder(notified=True)], NINE + timedelta(hours=1))
        assert result.fired == []

    def test_snoozed_reminder_does_not_fire(self, make_reminder):
        """An active snooze suppresses a due reminder."""
        reminder = make_reminder(snooze_until=NINE + timedelta(minutes=10))
        result = evaluate([reminder], NINE + timedelta(minutes=5))
        assert result.fired == []

    def test_snooze_suppresses_even_when_notified_false(self, make_reminder):
        """The snooze window alone holds the alert back."""
        reminder = make_reminder(notified=False, snooze_until=NINE + timedelta(minutes=10))
        assert is_snoozed(reminder, NINE + timedelta(minutes=9))
        assert not is_newly_due(reminder, NINE + timedelta(minutes=9))

    def test_fires_once_snooze_elapsed(self, make_reminder):
        """At the end of the snooze window the reminder is due again."""
        reminder = make_reminder(snooze_until=NINE + timedelta(minutes=10))
        result = evaluate([reminder], NINE + timedelta(minutes=10))
        assert len(result.fired) == 1

    def test_unmodified_reminders_pass_through(self, make_reminder):
        """Reminders that do not fire are the same objects, in the same order."""
        future = make_reminder(bill_name="Rent", due_date=date(2024, 4, 1))
        due = make_reminder(bill_name="Water")
        done = make_reminder(bill_name="Gas", notified=True)

        result = evaluate([future, due, done], NINE + timedelta(minutes=1))

        assert [r.bill_name for r in result.updated] == ["Rent", "Water", "Gas"]
        assert result.updated[0] is future
        assert result.updated[2] is done
        assert result.updated[1] is not due

    def test_other_fields_unchanged_when_marked(self, make_reminder):
        """Marking only flips notified."""
        reminder = make_reminder()
        marked = evaluate([reminder], NINE).updated[0]
        assert marked.model_dump(exclude={"notified"}) == reminder.model_dump(exclude={"notified"})

    def test_empty_set(self):
        """No reminders is an ordinary outcome."""
        result = evaluate([], NINE)
        assert result.updated == []
        assert result.fired == []
        assert result.has_fired is False

    def test_aware_snooze_read_as_local_time(self, make_reminder):
        """A UTC snooze_until from storage is compared as local wall-clock time."""
        snoozed = make_reminder(
            bill_name="Rent",
            due_date=date(2024, 3, 2),
            snooze_until="2024-03-01T09:10:00Z",
        )
        due = make_reminder(bill_name="Water", due_time=time(8, 0))

        result = evaluate([snoozed, due], NINE + timedelta(minutes=30))

        expected = datetime(2024, 3, 1, 9, 10, tzinfo=timezone.utc).astimezone()
        assert snoozed.snooze_until == expected.replace(tzinfo=None)
        assert [r.bill_name for r in result.fired] == ["Water"]

    def test_input_list_not_mutated(self, make_reminder):
        """evaluate() never mutates its input."""
        reminder = make_reminder()
        reminders = [reminder]
        evaluate(reminders, NINE)
        assert reminders == [reminder]
        assert reminder.notified is False


class TestEngineProperties:
    """Idempotence and exactly-once guarantees."""

    def test_idempotent_at_same_instant(self, make_reminder):
        """Evaluating the updated set again at the same instant fires nothing."""
        reminders = [
            make_reminder(bill_name="A"),
            make_reminder(bill_name="B", due_time=time(8, 0)),
            make_reminder(bill_name="C", due_date=date(2024, 3, 2)),
        ]
        now = NINE + timedelta(minutes=5)

        first = evaluate(reminders, now)
        second = evaluate(first.updated, now)

        assert len(first.fired) == 2
        assert second.fired == []
        assert second.updated == first.updated

    def test_exactly_once_across_ticks(self, make_reminder):
        """Over increasing ticks that cross the due-instant, it fires on one tick only."""
        reminders = [make_reminder()]
        fired_at = []

        tick = NINE - timedelta(minutes=2)
        while tick <= NINE + timedelta(minutes=3):
            result = evaluate(reminders, tick)
            if result.fired:
                fired_at.append(tick)
            reminders = result.updated
            tick += timedelta(seconds=30)

        assert fired_at == [NINE]

    def test_long_overdue_fires_once_without_replay(self, make_reminder):
        """A bill due days ago while the app was closed fires once on resume."""
        reminders = [make_reminder(due_date=date(2024, 2, 20))]

        resumed = evaluate(reminders, NINE)
        later = evaluate(resumed.updated, NINE + timedelta(seconds=30))

        assert len(resumed.fired) == 1
        assert later.fired == []


class TestScenarios:
    """End-to-end timelines from the reminder lifecycle."""

    def test_due_then_not_again(self, make_reminder):
        """Due 09:00; fires at 09:05; the 09:10 tick does not fire again."""
        reminders = [make_reminder()]

        at_0905 = evaluate(reminders, datetime(2024, 3, 1, 9, 5))
        at_0910 = evaluate(at_0905.updated, datetime(2024, 3, 1, 9, 10))

        assert len(at_0905.fired) == 1
        assert at_0910.fired == []

    def test_snoozed_at_nine(self, make_reminder):
        """Snoozed at 09:00 for ten minutes: quiet at 09:05, fires at 09:11."""
        reminders = [make_reminder(
            notified=False,
            snooze_until=datetime(2024, 3, 1, 9, 10),
        )]

        at_0905 = evaluate(reminders, datetime(2024, 3, 1, 9, 5))
        at_0911 = evaluate(at_0905.updated, datetime(2024, 3, 1, 9, 11))

        assert at_0905.fired == []
        assert len(at_0911.fired) == 1
