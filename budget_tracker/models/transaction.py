"""
Transaction and Summary Models

Transactions are recorded by the user and never touched by the reminder
engine. The summary models carry the month-scoped totals and chart data
computed by the aggregator.
"""

import calendar
import datetime as dt
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from budget_tracker.models.reminder import Reminder


class TransactionType(str, Enum):
    """Direction of money flow."""
    INCOME = "income"
    EXPENSE = "expense"


class Transaction(BaseModel):
    """
    A single income or expense entry.

    Immutable by id: edits replace the whole record, keeping the id.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Stable transaction ID"
    )
    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Free-text category (e.g., Groceries, Salary)"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount, always non-negative"
    )
    date: dt.date = Field(
        ...,
        description="Date of the transaction"
    )
    description: str = Field(
        default="",
        max_length=500,
    )


# =============================================================================
# MONTH VIEW
# =============================================================================

class ViewMonth(BaseModel):
    """The calendar month currently being viewed."""

    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)

    @classmethod
    def containing(cls, day: dt.date) -> "ViewMonth":
        return cls(year=day.year, month=day.month)

    def previous(self) -> "ViewMonth":
        if self.month == 1:
            return ViewMonth(year=self.year - 1, month=12)
        return ViewMonth(year=self.year, month=self.month - 1)

    def next(self) -> "ViewMonth":
        if self.month == 12:
            return ViewMonth(year=self.year + 1, month=1)
        return ViewMonth(year=self.year, month=self.month + 1)

    @property
    def label(self) -> str:
        """e.g. 'March 2024'"""
        return f"{calendar.month_name[self.month]} {self.year}"


class MonthlySummary(BaseModel):
    """Income, expense and balance totals."""

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class CategoryTotal(BaseModel):
    """Expense total for one category (pie chart slice)."""

    category: str
    total: Decimal


class DailyTotals(BaseModel):
    """Income and expenses for one day (bar chart column)."""

    day: dt.date
    label: str
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")


class MonthlyOverview(BaseModel):
    """Everything the dashboard needs for one month."""

    view_month: ViewMonth
    summary: MonthlySummary
    transactions: list[Transaction] = Field(default_factory=list)
    reminders: list[Reminder] = Field(default_factory=list)
    expenses_by_category: list[CategoryTotal] = Field(default_factory=list)
    weekly: list[DailyTotals] = Field(default_factory=list)
