"""
Main Orchestrator for Budget Tracker

This module ties together all the components and defines the
end-to-end flows for:
1. Reminders (save → reconcile → persist; tick → evaluate → persist → route)
2. Transactions (save → persist; month view → aggregate)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Only validated drafts reach the stores
- Every tick and every user mutation is serialized through one lock
- A failed write or a failed notification never corrupts the in-memory
  reminder set
- Every step is audited
"""

import threading
from typing import Optional
from uuid import UUID

import structlog

from budget_tracker.audit import AuditLogger, create_correlation_id
from budget_tracker.clock import Clock, SystemClock
from budget_tracker.config import get_settings
from budget_tracker.engine import (
    ActiveNotifications,
    NotificationRouter,
    evaluate,
    is_rescheduled,
    monthly_overview,
    reconcile_edit,
    snooze,
    sort_reminders,
    sort_transactions,
)
from budget_tracker.models.audit import AuditEvent, AuditEventBuilder
from budget_tracker.models.reminder import (
    EvaluationResult,
    PermissionState,
    Reminder,
    RouteOutcome,
)
from budget_tracker.models.transaction import MonthlyOverview, Transaction, ViewMonth
from budget_tracker.scheduler import ReminderScheduler
from budget_tracker.services.notifications import (
    AudioBackend,
    LoggingAudioBackend,
    LoggingNotificationBackend,
    NotificationBackend,
)
from budget_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    NotFoundError,
    ReminderRepository,
    TransactionRepository,
)
from budget_tracker.validation import ReminderDraft, TransactionDraft

logger = structlog.get_logger(__name__)


class ReminderNotFoundError(NotFoundError):
    """No reminder with the given id."""
    pass


class TransactionNotFoundError(NotFoundError):
    """No transaction with the given id."""
    pass


class ReminderFlow:
    """
    Orchestrates reminder management and alerting.

    Flow per tick:
    1. Snapshot the reminder set and read the clock
    2. Evaluate → (updated, fired)
    3. Persist `updated` (write-through)
    4. Route each fired reminder (toast or OS notification + audio)

    The reminder set is held in memory and written through to storage on
    every change. All mutations and ticks take `self._lock`, so an edit
    that lands between two ticks is always part of the next snapshot.
    """

    def __init__(
        self,
        repository: ReminderRepository,
        router: NotificationRouter,
        clock: Optional[Clock] = None,
        audit_logger: Optional[AuditLogger] = None,
        snooze_minutes: Optional[int] = None,
    ):
        self._repository = repository
        self._router = router
        self._clock = clock or SystemClock()
        self._audit_logger = audit_logger
        self._snooze_minutes = (
            snooze_minutes
            if snooze_minutes is not None
            else get_settings().reminders.snooze_minutes
        )
        self._lock = threading.RLock()
        self._reminders: list[Reminder] = repository.load()

    @property
    def active_notifications(self) -> list[Reminder]:
        """Reminders currently shown as in-app toasts."""
        with self._lock:
            return list(self._router.active)

    def start(self) -> PermissionState:
        """Startup hook: request notification permission if never asked."""
        return self._router.ensure_permission()

    def list_reminders(self) -> list[Reminder]:
        """All reminders, soonest due first."""
        with self._lock:
            return sort_reminders(self._reminders)

    def get_reminder(self, reminder_id: UUID) -> Reminder:
        with self._lock:
            return self._find(reminder_id)

    def save_reminder(
        self,
        draft: ReminderDraft,
        reminder_id: Optional[UUID] = None,
    ) -> Reminder:
        """
        Create a reminder, or edit an existing one.

        Edits go through reconciliation: moving the due-instant to a new
        future moment re-arms alerting; any other edit keeps the
        existing notified/snooze state.

        Raises:
            ReminderNotFoundError: If `reminder_id` is given but unknown
        """
        with self._lock:
            now = self._clock.now()

            if reminder_id is None:
                reminder = draft.to_reminder()
                self._reminders = [*self._reminders, reminder]
                event = AuditEventBuilder.reminder_created(reminder.id, reminder.bill_name)
            else:
                existing = self._find(reminder_id)
                submitted = draft.to_reminder(reminder_id=existing.id)
                rescheduled = is_rescheduled(existing, submitted, now)
                reminder = reconcile_edit(existing, submitted, now)
                self._reminders = [
                    reminder if r.id == reminder_id else r for r in self._reminders
                ]
                self._sync_active(reminder)
                event = AuditEventBuilder.reminder_updated(
                    reminder.id, reminder.bill_name, rescheduled=rescheduled
                )

            self._repository.save(self._reminders)

        self._audit(event)
        return reminder

    def delete_reminder(self, reminder_id: UUID) -> None:
        """
        Delete a reminder and any toast showing it.

        Raises:
            ReminderNotFoundError: If the id is unknown
        """
        with self._lock:
            self._find(reminder_id)
            self._reminders = [r for r in self._reminders if r.id != reminder_id]
            self._router.active.remove(reminder_id)
            self._repository.save(self._reminders)

        self._audit(AuditEventBuilder.reminder_deleted(reminder_id))

    def snooze_reminder(self, reminder_id: UUID) -> Reminder:
        """
        Snooze a reminder and close its toast.

        Raises:
            ReminderNotFoundError: If the id is unknown
        """
        with self._lock:
            self._find(reminder_id)
            self._reminders = snooze(
                self._reminders,
                reminder_id,
                self._clock.now(),
                minutes=self._snooze_minutes,
            )
            self._router.active.remove(reminder_id)
            self._repository.save(self._reminders)
            reminder = self._find(reminder_id)

        self._audit(AuditEventBuilder.reminder_snoozed(reminder.id, reminder.snooze_until))
        return reminder

    def dismiss_notification(self, reminder_id: UUID) -> bool:
        """
        Close a toast without snoozing.

        Returns False if no toast for this reminder was shown.
        """
        with self._lock:
            removed = self._router.active.remove(reminder_id)
        if removed:
            self._audit(AuditEventBuilder.notification_dismissed(reminder_id))
        return removed

    def check_reminders(self) -> list[RouteOutcome]:
        """
        One scheduler tick.

        Returns the routing outcome of every reminder that fired.
        """
        correlation_id = create_correlation_id()

        with self._lock:
            now = self._clock.now()
            result: EvaluationResult = evaluate(self._reminders, now)
            if not result.has_fired:
                return []

            self._reminders = result.updated
            self._repository.save(self._reminders)

            visibility = self._router.visibility()
            outcomes = []
            for reminder in result.fired:
                self._audit(AuditEventBuilder.reminder_fired(
                    reminder_id=reminder.id,
                    bill_name=reminder.bill_name,
                    due_instant=reminder.due_instant,
                    correlation_id=correlation_id,
                ))
                outcomes.append(self._router.route(reminder, visibility, correlation_id))

        logger.info(
            "reminders_fired",
            count=len(outcomes),
            correlation_id=str(correlation_id),
        )
        return outcomes

    def _find(self, reminder_id: UUID) -> Reminder:
        for reminder in self._reminders:
            if reminder.id == reminder_id:
                return reminder
        raise ReminderNotFoundError(f"Reminder not found: {reminder_id}")

    def _sync_active(self, reminder: Reminder) -> None:
        # An open toast shows the edited bill, not the stale one
        if reminder.id in self._router.active:
            self._router.active.add(reminder)

    def _audit(self, event: AuditEvent) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)


class TransactionFlow:
    """
    Orchestrates transaction management and the month dashboard.
    """

    def __init__(
        self,
        repository: TransactionRepository,
        reminders: Optional[ReminderFlow] = None,
        clock: Optional[Clock] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._reminders = reminders
        self._clock = clock or SystemClock()
        self._audit_logger = audit_logger
        self._lock = threading.RLock()
        self._transactions: list[Transaction] = repository.load()

    def list_transactions(self) -> list[Transaction]:
        """All transactions, newest first."""
        with self._lock:
            return sort_transactions(self._transactions)

    def save_transaction(
        self,
        draft: TransactionDraft,
        transaction_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Record a new transaction, or replace an existing one by id.

        Raises:
            TransactionNotFoundError: If `transaction_id` is given but unknown
        """
        with self._lock:
            if transaction_id is None:
                transaction = draft.to_transaction()
                self._transactions = [*self._transactions, transaction]
            else:
                if not any(t.id == transaction_id for t in self._transactions):
                    raise TransactionNotFoundError(f"Transaction not found: {transaction_id}")
                transaction = draft.to_transaction(transaction_id=transaction_id)
                self._transactions = [
                    transaction if t.id == transaction_id else t for t in self._transactions
                ]
            self._repository.save(self._transactions)

        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.transaction_saved(
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
            ))
        return transaction

    def delete_transaction(self, transaction_id: UUID) -> None:
        """
        Raises:
            TransactionNotFoundError: If the id is unknown
        """
        with self._lock:
            remaining = [t for t in self._transactions if t.id != transaction_id]
            if len(remaining) == len(self._transactions):
                raise TransactionNotFoundError(f"Transaction not found: {transaction_id}")
            self._transactions = remaining
            self._repository.save(self._transactions)

        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.transaction_deleted(transaction_id))

    def monthly_overview(self, view_month: Optional[ViewMonth] = None) -> MonthlyOverview:
        """
        Totals, filtered lists and chart data for one month.

        Defaults to the month containing today.
        """
        today = self._clock.today()
        view_month = view_month or ViewMonth.containing(today)
        reminders = self._reminders.list_reminders() if self._reminders else []
        with self._lock:
            transactions = list(self._transactions)
        return monthly_overview(transactions, reminders, view_month, today)


def create_app_components(
    username: str,
    store: Optional[KeyValueStore] = None,
    notifications: Optional[NotificationBackend] = None,
    audio: Optional[AudioBackend] = None,
    clock: Optional[Clock] = None,
    use_storage: bool = True,
) -> tuple[ReminderFlow, TransactionFlow, ReminderScheduler]:
    """
    Factory function to create all components for one user session.

    Args:
        username: Scopes the storage keys of this session.
        store: Storage backend. Defaults to JSON files in the configured
               data directory, or memory when `use_storage` is False.
        notifications, audio: Platform backends. Default to console ones.
        clock: Defaults to the system clock.

    Returns:
        (reminder_flow, transaction_flow, scheduler)

    The scheduler is not started. Call `scheduler.start()` after login and
    `scheduler.stop()` on logout.
    """
    settings = get_settings()
    clock = clock or SystemClock()

    if store is None:
        store = JsonFileKeyValueStore() if use_storage else InMemoryKeyValueStore()

    audit_logger = AuditLogger(
        storage=store,
        limit=settings.storage.audit_log_limit,
        key=f"audit_log_{username}",
    )

    router = NotificationRouter(
        notifications=notifications or LoggingNotificationBackend(),
        audio=audio or LoggingAudioBackend(),
        active=ActiveNotifications(),
        audit_logger=audit_logger,
        title=settings.reminders.notification_title,
        currency_symbol=settings.app.currency_symbol,
    )

    reminder_flow = ReminderFlow(
        repository=ReminderRepository(store, username, audit_logger),
        router=router,
        clock=clock,
        audit_logger=audit_logger,
        snooze_minutes=settings.reminders.snooze_minutes,
    )
    transaction_flow = TransactionFlow(
        repository=TransactionRepository(store, username, audit_logger),
        reminders=reminder_flow,
        clock=clock,
        audit_logger=audit_logger,
    )
    scheduler = ReminderScheduler(
        on_tick=reminder_flow.check_reminders,
        interval_seconds=settings.reminders.poll_interval_seconds,
        audit_logger=audit_logger,
    )

    return reminder_flow, transaction_flow, scheduler
