"""
Console runner for Budget Tracker

Runs one user's reminder scheduler in the foreground of a terminal and
reports alerts through the console notification backends. Rendering is
not this module's job; it prints the month summary once at startup and
then just keeps the scheduler alive.

Usage:
    python -m app.main [--user NAME] [--data-dir DIR] [--foreground]

Stop with Ctrl+C, which stops the scheduler the same way a logout does.
"""

import argparse
import logging
import sys
import threading
from typing import Optional

import structlog

from budget_tracker.config import get_settings, validate_all_settings
from budget_tracker.engine import format_currency
from budget_tracker.models.reminder import AppVisibility
from budget_tracker.orchestrator import create_app_components
from budget_tracker.services.notifications import (
    LoggingAudioBackend,
    LoggingNotificationBackend,
)
from budget_tracker.services.storage import JsonFileKeyValueStore

logger = structlog.get_logger("budget_tracker.app")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the bill reminder scheduler")
    parser.add_argument("--user", default="default", help="Whose reminders to watch")
    parser.add_argument("--data-dir", default=None, help="Override STORAGE_DATA_DIR")
    parser.add_argument(
        "--foreground",
        action="store_true",
        help="Treat the app as visible (alerts become in-app toasts)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    checks = validate_all_settings()
    failed = [name for name, ok in checks.items() if ok is False]
    if failed:
        for name in failed:
            print(f"Configuration error in {name}: {checks.get(f'{name}_error')}", file=sys.stderr)
        return 2

    settings = get_settings()
    logging.basicConfig(
        level=settings.app.log_level,
        format="%(message)s",
        stream=sys.stdout,
    )

    visibility = AppVisibility.FOREGROUND if args.foreground else AppVisibility.BACKGROUND
    reminder_flow, transaction_flow, scheduler = create_app_components(
        username=args.user,
        store=JsonFileKeyValueStore(args.data_dir),
        notifications=LoggingNotificationBackend(visibility=visibility),
        audio=LoggingAudioBackend(),
    )

    overview = transaction_flow.monthly_overview()
    symbol = settings.app.currency_symbol
    print(f"{overview.view_month.label} for {args.user}")
    print(f"  Income:   {format_currency(overview.summary.total_income, symbol)}")
    print(f"  Expenses: {format_currency(overview.summary.total_expenses, symbol)}")
    print(f"  Balance:  {format_currency(overview.summary.balance, symbol)}")
    print(f"  Reminders this month: {len(overview.reminders)}")

    permission = reminder_flow.start()
    logger.info("notification_permission", state=permission.value)

    scheduler.start()
    logger.info("scheduler_running", interval_seconds=scheduler.interval_seconds)

    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
