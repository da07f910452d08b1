"""
Data Models Package

This package contains all Pydantic models used in Budget Tracker.
All data flowing through the system must conform to these schemas.
"""

from budget_tracker.models.reminder import (
    AppVisibility,
    DeliveryChannel,
    EvaluationResult,
    NotificationSound,
    PermissionState,
    Reminder,
    RouteOutcome,
)
from budget_tracker.models.transaction import (
    CategoryTotal,
    DailyTotals,
    MonthlyOverview,
    MonthlySummary,
    Transaction,
    TransactionType,
    ViewMonth,
)
from budget_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Reminder models
    "AppVisibility",
    "DeliveryChannel",
    "EvaluationResult",
    "NotificationSound",
    "PermissionState",
    "Reminder",
    "RouteOutcome",
    # Transaction models
    "CategoryTotal",
    "DailyTotals",
    "MonthlyOverview",
    "MonthlySummary",
    "Transaction",
    "TransactionType",
    "ViewMonth",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
