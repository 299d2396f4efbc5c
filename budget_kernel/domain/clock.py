"""
Clock -- injectable source of "now".

The proration engine needs the current instant for one thing only: anchoring
a budget record whose period cannot be parsed to the current month.  It
asks an injected Clock instead of calling ``datetime.now()``, so that
fallback is reproducible in tests and replays.

Failure modes:
    - None.  Clocks always return a timezone-aware UTC datetime.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):
    """Source of the current UTC instant."""

    @abstractmethod
    def now_utc(self) -> datetime:
        ...


class SystemClock(Clock):
    """Wall-clock time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Clock pinned to a fixed instant until ``set_time()`` moves it.

    Naive datetimes are taken as UTC.  Defaults to 2024-01-01 12:00 UTC.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def now_utc(self) -> datetime:
        if self._fixed_time.tzinfo is None:
            return self._fixed_time.replace(tzinfo=timezone.utc)
        return self._fixed_time.astimezone(timezone.utc)

    def set_time(self, time: datetime) -> None:
        self._fixed_time = time
