"""
Tests for the month aggregator and chart data.
"""

from datetime import date, time
from decimal import Decimal

from budget_tracker.engine import (
    expenses_by_category,
    filter_to_month,
    format_currency,
    monthly_overview,
    sort_reminders,
    sort_transactions,
    summarize,
    weekly_summary,
)
from budget_tracker.models.transaction import TransactionType, ViewMonth


class TestSummarize:
    """Income, expense and balance totals."""

    def test_income_and_expense(self, make_transaction):
        """income 100, expense 40 -> 100 / 40 / 60"""
        summary = summarize([
            make_transaction(type=TransactionType.INCOME, amount=Decimal("100")),
            make_transaction(type=TransactionType.EXPENSE, amount=Decimal("40")),
        ])
        assert summary.total_income == Decimal("100")
        assert summary.total_expenses == Decimal("40")
        assert summary.balance == Decimal("60")

    def test_empty(self):
        summary = summarize([])
        assert summary.total_income == 0
        assert summary.total_expenses == 0
        assert summary.balance == 0

    def test_negative_balance(self, make_transaction):
        summary = summarize([make_transaction(amount=Decimal("25.10"))])
        assert summary.balance == Decimal("-25.10")

    def test_exact_decimal_accumulation(self, make_transaction):
        """0.1 + 0.2 is exactly 0.3, unlike float."""
        summary = summarize([
            make_transaction(type=TransactionType.INCOME, amount=Decimal("0.1")),
            make_transaction(type=TransactionType.INCOME, amount=Decimal("0.2")),
        ])
        assert summary.total_income == Decimal("0.3")


class TestFilterToMonth:
    """Calendar month filtering."""

    def test_month_boundary(self, make_transaction):
        """2024-01-31 belongs to January, not February."""
        t = make_transaction(date=date(2024, 1, 31))
        assert filter_to_month([t], 2024, 2) == []
        assert filter_to_month([t], 2024, 1) == [t]

    def test_same_month_other_year_excluded(self, make_transaction):
        t = make_transaction(date=date(2023, 3, 10))
        assert filter_to_month([t], 2024, 3) == []

    def test_reminders_filtered_by_due_date(self, make_reminder):
        march = make_reminder(due_date=date(2024, 3, 31), due_time=time(23, 59))
        april = make_reminder(due_date=date(2024, 4, 1), due_time=time(0, 0))
        assert filter_to_month([march, april], 2024, 3) == [march]
        assert filter_to_month([march, april], 2024, 4) == [april]


class TestChartData:
    """Category and weekly series."""

    def test_expenses_by_category(self, make_transaction):
        """Income is ignored; categories keep first-seen order."""
        totals = expenses_by_category([
            make_transaction(category="Rent", amount=Decimal("800")),
            make_transaction(category="Groceries", amount=Decimal("30")),
            make_transaction(category="Rent", amount=Decimal("50")),
            make_transaction(type=TransactionType.INCOME, category="Salary", amount=Decimal("2000")),
        ])
        assert [(c.category, c.total) for c in totals] == [
            ("Rent", Decimal("850")),
            ("Groceries", Decimal("30")),
        ]

    def test_weekly_summary_window(self, make_transaction):
        """Seven days ending today, oldest first, out-of-window entries ignored."""
        today = date(2024, 3, 10)  # a Sunday
        days = weekly_summary([
            make_transaction(date=date(2024, 3, 10), amount=Decimal("5")),
            make_transaction(date=date(2024, 3, 4), type=TransactionType.INCOME, amount=Decimal("7")),
            make_transaction(date=date(2024, 3, 3), amount=Decimal("100")),
            make_transaction(date=date(2024, 3, 11), amount=Decimal("100")),
        ], today)

        assert len(days) == 7
        assert days[0].day == date(2024, 3, 4)
        assert days[0].label == "Mon"
        assert days[0].income == Decimal("7")
        assert days[-1].day == today
        assert days[-1].expenses == Decimal("5")
        assert sum(d.expenses for d in days) == Decimal("5")


class TestSortingAndFormatting:
    """List ordering and currency display."""

    def test_transactions_newest_first(self, make_transaction):
        older = make_transaction(date=date(2024, 3, 1))
        newer = make_transaction(date=date(2024, 3, 20))
        assert sort_transactions([older, newer]) == [newer, older]

    def test_reminders_soonest_first(self, make_reminder):
        late = make_reminder(due_time=time(18, 0))
        early = make_reminder(due_time=time(7, 0))
        assert sort_reminders([late, early]) == [early, late]

    def test_format_currency(self):
        assert format_currency(Decimal("1234.5")) == "$1,234.50"
        assert format_currency(Decimal("-40")) == "-$40.00"
        assert format_currency(Decimal("0.005")) == "$0.01"
        assert format_currency(Decimal("12"), symbol="€") == "€12.00"


class TestMonthlyOverview:
    """The dashboard bundle."""

    def test_overview_scoped_to_month(self, make_transaction, make_reminder):
        transactions = [
            make_transaction(type=TransactionType.INCOME, amount=Decimal("100"), date=date(2024, 3, 5)),
            make_transaction(amount=Decimal("40"), date=date(2024, 3, 6)),
            make_transaction(amount=Decimal("999"), date=date(2024, 2, 29)),
        ]
        reminders = [
            make_reminder(due_date=date(2024, 3, 15)),
            make_reminder(due_date=date(2024, 4, 15)),
        ]

        overview = monthly_overview(
            transactions, reminders, ViewMonth(year=2024, month=3), today=date(2024, 3, 7)
        )

        assert overview.summary.balance == Decimal("60")
        assert len(overview.transactions) == 2
        assert overview.transactions[0].date == date(2024, 3, 6)
        assert [r.due_date for r in overview.reminders] == [date(2024, 3, 15)]
        assert overview.expenses_by_category[0].total == Decimal("40")
        assert overview.view_month.label == "March 2024"
