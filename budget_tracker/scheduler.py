"""
Reminder Scheduler

Calls a tick function at a fixed interval on a background thread.

DESIGN DECISION: One polling loop for all reminders, not one timer per
reminder. Reminders can change between ticks and there are no per-
reminder timers to cancel or leak. Detection latency is bounded by the
interval.

Stopping (e.g. on logout) is final for the current run: once `stop()`
returns, no new tick will start until `start()` is called again, and
without a timeout no tick is running either. Each run has its own stop
event, so a restart never revives a loop that was told to stop.
"""

import threading
from typing import Any, Callable, Optional

import structlog

from budget_tracker.audit import AuditLogger
from budget_tracker.config import get_settings
from budget_tracker.models.audit import AuditEventBuilder

logger = structlog.get_logger(__name__)


class ReminderScheduler:
    """
    Periodic ticker.

    `tick()` can also be called directly, which is how tests drive the
    scheduler deterministically without starting the thread.
    """

    def __init__(
        self,
        on_tick: Callable[[], Any],
        interval_seconds: Optional[float] = None,
        audit_logger: Optional[AuditLogger] = None,
        run_immediately: bool = True,
    ):
        """
        Args:
            on_tick: Called once per tick. Exceptions are logged, not raised.
            interval_seconds: Poll interval. Defaults to the configured value.
            audit_logger: Receives start/stop events.
            run_immediately: Tick once as soon as the scheduler starts,
                             so reminders that fell due while the app was
                             closed do not wait a full interval.
        """
        self._on_tick = on_tick
        self._interval = (
            interval_seconds
            if interval_seconds is not None
            else get_settings().reminders.poll_interval_seconds
        )
        self._audit_logger = audit_logger
        self._run_immediately = run_immediately
        self._stop_event = threading.Event()
        self._tick_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        """True while a loop is alive and has not been told to stop."""
        return (
            self._thread is not None
            and self._thread.is_alive()
            and not self._stop_event.is_set()
        )

    def start(self) -> None:
        """
        Start ticking. Calling start on a running scheduler does nothing.

        If a previous run was stopped but is still finishing a tick, this
        waits for it to exit first, so at most one loop is ever alive.
        """
        if self.is_running:
            return

        previous = self._thread
        if previous is not None and previous is not threading.current_thread():
            previous.join()

        # Each run owns its stop signal; a stopped loop never sees it cleared
        stop_event = threading.Event()
        self._stop_event = stop_event
        self._thread = threading.Thread(
            target=self._run,
            args=(stop_event,),
            name="reminder-scheduler",
            daemon=True,
        )
        self._thread.start()
        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.scheduler_started(self._interval))

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop ticking and wait for an in-progress tick to finish.

        Safe to call more than once, and from inside a tick. If `timeout`
        expires first, no new tick starts, and the next `start()` waits for
        the running one to end.
        """
        was_running = self.is_running
        self._stop_event.set()

        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        if thread is not None and not thread.is_alive():
            self._thread = None

        if was_running and self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.scheduler_stopped())

    def tick(self) -> bool:
        """
        Run one tick now.

        Returns False (and does nothing) once the scheduler has been stopped.
        """
        return self._tick(self._stop_event)

    def _tick(self, stop_event: threading.Event) -> bool:
        with self._tick_lock:
            if stop_event.is_set():
                return False
            try:
                self._on_tick()
            except Exception as e:
                logger.exception("reminder_tick_failed")
                if self._audit_logger:
                    self._audit_logger.log(AuditEventBuilder.system_error(
                        error_type=type(e).__name__,
                        error_message=str(e),
                        details={"source": "reminder_tick"},
                    ))
            return True

    def _run(self, stop_event: threading.Event) -> None:
        if self._run_immediately:
            self._tick(stop_event)
        while not stop_event.wait(self._interval):
            self._tick(stop_event)
