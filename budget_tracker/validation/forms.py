"""
Form Input Validation

DESIGN DECISION: Raw form input is validated here, at the boundary.
Nothing past this module ever sees a non-numeric or negative amount,
an empty bill name or an unparsable date.

IMPORTANT: Validation NEVER silently fixes input. Every problem is
reported back as a ValidationIssue so the form can show it.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from budget_tracker.models.reminder import NotificationSound, Reminder
from budget_tracker.models.transaction import Transaction, TransactionType


class ValidationIssue(BaseModel):
    """A single problem found in submitted input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'decimal_parsing')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
    )


class InputValidationError(ValueError):
    """Submitted form input was rejected."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        summary = "; ".join(f"{i.field}: {i.message}" for i in issues)
        super().__init__(f"Invalid input: {summary}")


class ReminderDraft(BaseModel):
    """The user-editable fields of a reminder, as submitted."""
    model_config = ConfigDict(str_strip_whitespace=True)

    bill_name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., ge=0)
    due_date: dt.date
    due_time: dt.time
    notification_sound: NotificationSound = NotificationSound.DEFAULT

    def to_reminder(self, reminder_id: Optional[UUID] = None) -> Reminder:
        """A fresh, un-notified, un-snoozed reminder with these fields."""
        fields = self.model_dump()
        if reminder_id is not None:
            fields["id"] = reminder_id
        return Reminder(**fields)


class TransactionDraft(BaseModel):
    """The fields of a transaction, as submitted."""
    model_config = ConfigDict(str_strip_whitespace=True)

    type: TransactionType
    category: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., ge=0)
    date: dt.date
    description: str = Field(default="", max_length=500)

    def to_transaction(self, transaction_id: Optional[UUID] = None) -> Transaction:
        fields = self.model_dump()
        if transaction_id is not None:
            fields["id"] = transaction_id
        return Transaction(**fields)


def _issues_from(error: ValidationError) -> list[ValidationIssue]:
    issues = []
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"]) or "form"
        issues.append(ValidationIssue(
            field=field,
            issue_type=err["type"],
            message=err["msg"],
        ))
    return issues


def _blank_to_missing(raw: dict[str, Any]) -> dict[str, Any]:
    # Empty form fields mean "not provided", not "empty string"
    return {
        key: value for key, value in raw.items()
        if not (isinstance(value, str) and not value.strip())
    }


def parse_reminder_form(raw: dict[str, Any]) -> ReminderDraft:
    """
    Validate a submitted reminder form.

    Raises:
        InputValidationError: With one issue per rejected field
    """
    try:
        return ReminderDraft.model_validate(_blank_to_missing(raw))
    except ValidationError as e:
        raise InputValidationError(_issues_from(e)) from e


def parse_transaction_form(raw: dict[str, Any]) -> TransactionDraft:
    """
    Validate a submitted transaction form.

    Raises:
        InputValidationError: With one issue per rejected field
    """
    try:
        return TransactionDraft.model_validate(_blank_to_missing(raw))
    except ValidationError as e:
        raise InputValidationError(_issues_from(e)) from e
