"""
Calendar -- Stateless reference-calendar arithmetic for budget periods.

Responsibility:
    Parses "YYYYMM" budget periods and performs the whole-day calendar
    arithmetic the proration engine needs: month boundaries, Gregorian
    month lengths, normalization of dates/datetimes to calendar days, and
    inclusive day counting.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Every function takes its ReferenceCalendar as a parameter; there is no
    module-level mutable calendar or formatter state.

Invariants enforced:
    - Determinism: results never depend on the host timezone or locale.
      Aware datetimes are converted to the reference offset before the time
      of day is dropped.
    - Day differences are taken between calendar days, never between
      date-times, so partial days cannot leak into counts.

Failure modes:
    - PeriodParseError from ``parse_period`` and the strict period helpers.
    - CalendarConfigError from ``ReferenceCalendar`` construction.
    - ``days_in_month`` never raises for a bad period; it returns the
      calendar's fallback day count and logs a warning.
"""

from __future__ import annotations

import calendar as _gregorian
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

from budget_kernel.domain.clock import Clock
from budget_kernel.exceptions import CalendarConfigError, PeriodParseError
from budget_kernel.logging_config import get_logger

logger = get_logger("domain.calendar")

_PERIOD_PATTERN = re.compile(r"^(\d{4})(\d{2})$")

# Real-world UTC offsets span -12:00 .. +14:00
_MAX_OFFSET_MINUTES = 14 * 60


@dataclass(frozen=True)
class ReferenceCalendar:
    """
    Fixed-offset Gregorian calendar used for all day-boundary computation.

    Contract:
        Immutable configuration value.  Passed explicitly to every calendar
        function and to the proration engine; never reconfigured mid-run.

    Guarantees:
        - ``tzinfo`` is a fixed-offset timezone (no DST transitions).
        - ``fallback_days_in_month`` is a plausible month length (28-31).
        - ``decimal_precision`` is at least 1.
    """

    utc_offset_minutes: int = 0
    fallback_days_in_month: int = 30
    decimal_precision: int = 28

    def __post_init__(self) -> None:
        for field in ("utc_offset_minutes", "fallback_days_in_month", "decimal_precision"):
            value = getattr(self, field)
            if not isinstance(value, int) or isinstance(value, bool):
                raise CalendarConfigError(field, value, "must be an integer")
        if abs(self.utc_offset_minutes) > _MAX_OFFSET_MINUTES:
            raise CalendarConfigError(
                "utc_offset_minutes",
                self.utc_offset_minutes,
                f"must be within +/-{_MAX_OFFSET_MINUTES}",
            )
        if self.fallback_days_in_month not in (28, 29, 30, 31):
            raise CalendarConfigError(
                "fallback_days_in_month",
                self.fallback_days_in_month,
                "must be between 28 and 31",
            )
        if self.decimal_precision < 1:
            raise CalendarConfigError(
                "decimal_precision", self.decimal_precision, "must be a positive integer"
            )

    @property
    def tzinfo(self) -> timezone:
        """Fixed-offset timezone of this calendar."""
        if self.utc_offset_minutes == 0:
            return timezone.utc
        return timezone(timedelta(minutes=self.utc_offset_minutes))


DEFAULT_CALENDAR = ReferenceCalendar()


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month; ordering is chronological."""

    year: int
    month: int

    @classmethod
    def from_date(cls, day: date) -> YearMonth:
        return cls(day.year, day.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def days(self) -> int:
        """Gregorian length of the month (28/29/30/31)."""
        return _gregorian.monthrange(self.year, self.month)[1]

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days)

    def contains(self, day: date) -> bool:
        return self.first_day <= day <= self.last_day

    def __str__(self) -> str:
        return f"{self.year:04d}{self.month:02d}"


# ---------------------------------------------------------------------------
# Period parsing
# ---------------------------------------------------------------------------


def parse_period(period: object) -> YearMonth:
    """
    Parse a "YYYYMM" budget period.

    Postconditions:
        Returns the YearMonth denoted by ``period``.  Surrounding whitespace
        is tolerated; nothing else is.

    Raises:
        PeriodParseError: If ``period`` is missing, not a string, not six
            digits, or names a month outside 1-12 or year 0.
    """
    if period is None:
        raise PeriodParseError(period, "period is missing")
    if not isinstance(period, str):
        raise PeriodParseError(period, "period must be a string")

    match = _PERIOD_PATTERN.match(period.strip())
    if match is None:
        raise PeriodParseError(period, "expected six digits in YYYYMM form")

    year, month = int(match.group(1)), int(match.group(2))
    if year < 1:
        raise PeriodParseError(period, "year must be at least 1")
    if not 1 <= month <= 12:
        raise PeriodParseError(period, "month must be between 01 and 12")
    return YearMonth(year, month)


def days_in_month(
    period: object,
    calendar: ReferenceCalendar = DEFAULT_CALENDAR,
) -> int:
    """
    Number of days in the month named by ``period``.

    Falls back to ``calendar.fallback_days_in_month`` when the period cannot
    be parsed.  The fallback keeps aggregate computations total; it is not a
    success signal, so a warning is logged.
    """
    try:
        return parse_period(period).days
    except PeriodParseError as exc:
        logger.warning("period_parse_fallback", extra={
            "period": repr(period),
            "reason": exc.reason,
            "fallback_days": calendar.fallback_days_in_month,
        })
        return calendar.fallback_days_in_month


def first_day_of_period(period: object) -> date:
    """First calendar day of the period's month.  Raises PeriodParseError."""
    return parse_period(period).first_day


def last_day_of_period(period: object) -> date:
    """Last calendar day of the period's month.  Raises PeriodParseError."""
    return parse_period(period).last_day


# ---------------------------------------------------------------------------
# Day normalization and counting
# ---------------------------------------------------------------------------


def to_calendar_day(
    value: date | datetime,
    calendar: ReferenceCalendar = DEFAULT_CALENDAR,
) -> date:
    """
    Truncate a date or datetime to a calendar day in the reference zone.

    Aware datetimes are converted to the reference offset first.  Naive
    datetimes are taken as already expressed in the reference zone.

    Raises:
        TypeError: If ``value`` is neither a date nor a datetime.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None and value.utcoffset() is not None:
            value = value.astimezone(calendar.tzinfo)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def start_of_day(
    day: date,
    calendar: ReferenceCalendar = DEFAULT_CALENDAR,
) -> datetime:
    """Midnight of ``day`` in the reference zone (timezone-aware)."""
    return datetime.combine(day, time.min, tzinfo=calendar.tzinfo)


def days_between(start: date, end: date) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if reversed)."""
    return (end - start).days


def inclusive_day_count(start: date, end: date) -> int:
    """Days from ``start`` to ``end`` counting both endpoints; 0 if reversed."""
    return max(days_between(start, end) + 1, 0)


def today(clock: Clock, calendar: ReferenceCalendar = DEFAULT_CALENDAR) -> date:
    """The clock's current instant as a reference-zone calendar day."""
    return to_calendar_day(clock.now_utc(), calendar)
