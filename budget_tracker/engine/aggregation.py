"""
Month Aggregator

Filters transactions and reminders to the viewed calendar month and
computes the dashboard totals and chart series.

All sums are exact Decimal accumulations of the stored amounts. Rounding
happens only when formatting for display.
"""

from collections import OrderedDict
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TypeVar, Union

from budget_tracker.models.reminder import Reminder
from budget_tracker.models.transaction import (
    CategoryTotal,
    DailyTotals,
    MonthlyOverview,
    MonthlySummary,
    Transaction,
    TransactionType,
    ViewMonth,
)

ItemT = TypeVar("ItemT", Transaction, Reminder)

_CENT = Decimal("0.01")


def item_date(item: Union[Transaction, Reminder]) -> date:
    """The date an item is filed under: transaction date or reminder due date."""
    if isinstance(item, Reminder):
        return item.due_date
    return item.date


def filter_to_month(items: list[ItemT], year: int, month: int) -> list[ItemT]:
    """Items whose date falls in exactly this calendar year and month."""
    return [
        item for item in items
        if item_date(item).year == year and item_date(item).month == month
    ]


def summarize(transactions: list[Transaction]) -> MonthlySummary:
    """Total income, total expenses and balance (income minus expenses)."""
    income = sum(
        (t.amount for t in transactions if t.type == TransactionType.INCOME),
        Decimal("0"),
    )
    expenses = sum(
        (t.amount for t in transactions if t.type == TransactionType.EXPENSE),
        Decimal("0"),
    )
    return MonthlySummary(
        total_income=income,
        total_expenses=expenses,
        balance=income - expenses,
    )


def expenses_by_category(transactions: list[Transaction]) -> list[CategoryTotal]:
    """Expense totals per category, in the order categories first appear."""
    totals: "OrderedDict[str, Decimal]" = OrderedDict()
    for t in transactions:
        if t.type != TransactionType.EXPENSE:
            continue
        totals[t.category] = totals.get(t.category, Decimal("0")) + t.amount
    return [CategoryTotal(category=name, total=total) for name, total in totals.items()]


def weekly_summary(transactions: list[Transaction], today: date) -> list[DailyTotals]:
    """
    Income and expenses for each of the last seven days, oldest first.

    The last entry is `today`. Transactions outside that window, including
    future-dated ones, are ignored.
    """
    days = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
    totals = {
        day: DailyTotals(day=day, label=day.strftime("%a"))
        for day in days
    }

    for t in transactions:
        bucket = totals.get(t.date)
        if bucket is None:
            continue
        if t.type == TransactionType.INCOME:
            bucket.income += t.amount
        else:
            bucket.expenses += t.amount

    return [totals[day] for day in days]


def sort_transactions(transactions: list[Transaction]) -> list[Transaction]:
    """Newest first."""
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def sort_reminders(reminders: list[Reminder]) -> list[Reminder]:
    """Soonest due first."""
    return sorted(reminders, key=lambda r: r.due_instant)


def format_currency(amount: Decimal, symbol: str = "$") -> str:
    """
    Two-decimal display formatting with thousands separators.

    e.g. Decimal("1234.5") -> "$1,234.50", Decimal("-40") -> "-$40.00"
    """
    rounded = Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def monthly_overview(
    transactions: list[Transaction],
    reminders: list[Reminder],
    view_month: ViewMonth,
    today: date,
) -> MonthlyOverview:
    """Everything the dashboard shows for one month."""
    month_transactions = filter_to_month(transactions, view_month.year, view_month.month)
    month_reminders = filter_to_month(reminders, view_month.year, view_month.month)

    return MonthlyOverview(
        view_month=view_month,
        summary=summarize(month_transactions),
        transactions=sort_transactions(month_transactions),
        reminders=sort_reminders(month_reminders),
        expenses_by_category=expenses_by_category(month_transactions),
        weekly=weekly_summary(month_transactions, today),
    )
