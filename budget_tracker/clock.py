"""
Clock abstraction.

The engine never reads the wall clock itself; flows ask an injected
Clock, so tests can step time by hand instead of sleeping.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import Optional


class Clock(ABC):
    """Source of the current local wall-clock time (naive datetime)."""

    @abstractmethod
    def now(self) -> datetime:
        pass

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """The machine's local time."""

    def now(self) -> datetime:
        return datetime.now()


class ManualClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2024, 1, 1, 0, 0)

    def now(self) -> datetime:
        return self._now

    def set(self, moment: datetime) -> None:
        self._now = moment

    def advance(self, delta: Optional[timedelta] = None, **kwargs: float) -> datetime:
        """
        Move forward by `delta` or by timedelta keyword arguments.

        e.g. clock.advance(minutes=5)
        """
        self._now += delta if delta is not None else timedelta(**kwargs)
        return self._now
