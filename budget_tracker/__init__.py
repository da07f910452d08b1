"""
Budget Tracker - Source Package

A personal finance tracker that records income and expenses, keeps
bill reminders and alerts the user when a bill falls due.

DESIGN PRINCIPLES:
1. A due bill is alerted exactly once (until snoozed or rescheduled)
2. Side effects never corrupt the reminder set
3. Every state change is auditable
4. Storage and notification backends are swappable
"""

__version__ = "1.0.0"
__author__ = "Budget Tracker Team"
