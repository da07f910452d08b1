"""Input validation package."""

from budget_tracker.validation.forms import (
    InputValidationError,
    ReminderDraft,
    TransactionDraft,
    ValidationIssue,
    parse_reminder_form,
    parse_transaction_form,
)

__all__ = [
    "InputValidationError",
    "ReminderDraft",
    "TransactionDraft",
    "ValidationIssue",
    "parse_reminder_form",
    "parse_transaction_form",
]
