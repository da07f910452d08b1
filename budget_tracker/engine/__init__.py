"""
Reminder engine: due detection, edit reconciliation, snoozing,
notification routing and month aggregation.
"""

from budget_tracker.engine.aggregation import (
    expenses_by_category,
    filter_to_month,
    format_currency,
    monthly_overview,
    sort_reminders,
    sort_transactions,
    summarize,
    weekly_summary,
)
from budget_tracker.engine.due_detection import evaluate, is_newly_due, is_snoozed
from budget_tracker.engine.reconcile import (
    DEFAULT_SNOOZE_MINUTES,
    is_rescheduled,
    reconcile_edit,
    snooze,
)
from budget_tracker.engine.router import ActiveNotifications, NotificationRouter

__all__ = [
    # Aggregation
    "expenses_by_category",
    "filter_to_month",
    "format_currency",
    "monthly_overview",
    "sort_reminders",
    "sort_transactions",
    "summarize",
    "weekly_summary",
    # Due detection
    "evaluate",
    "is_newly_due",
    "is_snoozed",
    # Reconciliation
    "DEFAULT_SNOOZE_MINUTES",
    "is_rescheduled",
    "reconcile_edit",
    "snooze",
    # Routing
    "ActiveNotifications",
    "NotificationRouter",
]
