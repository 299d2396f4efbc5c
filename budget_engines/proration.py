"""
budget_engines.proration -- Prorated budget over an arbitrary date range.

Responsibility:
    Given a repository of monthly budget records and a start/end interval,
    give each overlapping month a window of days, multiply the window length
    by that month's daily rate, and sum.  Windows are positional: the
    earliest overlapping month runs from ``start`` to its month end, the
    latest from its month start to ``end``, months between are whole, and a
    lone overlapping month takes the whole interval.

Architecture position:
    Engines -- pure calculation layer.  The only I/O is the single
    ``repository.get_all()`` call per invocation.
    Imports budget_kernel domain types only.

Invariants enforced:
    - Determinism: identical repository snapshots and intervals produce
      identical results; no state is kept between calls.
    - Whole-day arithmetic in a fixed reference calendar: inputs are
      truncated to calendar days in the calendar's offset, so the caller's
      timezone cannot shift the result.
    - Exact arithmetic: daily rates and contributions are rationals; the
      total is converted to Decimal exactly once, at the end.
    - Inclusive counting: both interval endpoints are counted.

Failure modes:
    - None for data problems.  ``start > end`` and "no overlapping month"
      yield Decimal("0").  A record with an unparseable period is anchored
      to the clock's current month with the calendar's fallback day count
      and a ``budget_period_unparseable`` warning is logged.
    - TypeError if ``start``/``end`` are not dates or datetimes.

Usage:
    from budget_engines.proration import ProrationEngine
    from budget_kernel.domain import BudgetRecord, InMemoryBudgetRepository

    engine = ProrationEngine(InMemoryBudgetRepository([
        BudgetRecord("202308", 31),
        BudgetRecord("202309", 300),
    ]))
    engine.total_amount(date(2023, 8, 31), date(2023, 9, 2))  # Decimal("21")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, localcontext
from fractions import Fraction

from budget_engines.tracer import traced_engine
from budget_kernel.domain.budget import BudgetRecord
from budget_kernel.domain.calendar import (
    DEFAULT_CALENDAR,
    ReferenceCalendar,
    YearMonth,
    inclusive_day_count,
    parse_period,
    to_calendar_day,
    today,
)
from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.repository import BudgetRepository
from budget_kernel.exceptions import PeriodParseError
from budget_kernel.logging_config import get_logger

logger = get_logger("engines.proration")


@dataclass(frozen=True)
class ProrationLine:
    """
    One month's share of a prorated total.

    All fields are immutable.  ``amount`` is ``daily_rate`` applied to
    ``days``, converted from the exact rational value.
    """

    period: str
    window_start: date
    window_end: date
    days: int
    days_in_month: int
    daily_rate: Decimal
    amount: Decimal
    is_fallback: bool = False


@dataclass(frozen=True)
class _MonthSpan:
    """A budget record resolved onto the reference calendar."""

    record: BudgetRecord
    year_month: YearMonth
    days_in_month: int
    is_fallback: bool

    @property
    def first_day(self) -> date:
        return self.year_month.first_day

    @property
    def last_day(self) -> date:
        return self.year_month.last_day

    @property
    def daily_rate(self) -> Fraction:
        if self.is_fallback:
            return Fraction(self.record.amount) / self.days_in_month
        return self.record.daily_rate_exact


@dataclass(frozen=True)
class _Share:
    span: _MonthSpan
    window_start: date
    window_end: date
    days: int
    amount: Fraction


class ProrationEngine:
    """
    Prorates monthly budgets over a date interval.

    Contract:
        Stateless apart from its collaborators.  Re-reads the repository on
        every call and never retains records afterwards.
    Guarantees:
        - ``total_amount`` returns Decimal("0") for reversed intervals and
          for intervals no record overlaps.
        - Result is independent of repository ordering.
        - Monotone in the interval when all amounts are non-negative and
          the budgeted months have no gaps.
        - ``breakdown`` lines are in chronological order and their exact
          amounts sum to ``total_amount``.
    Non-goals:
        - Does not round for display; callers quantize if they need to.
        - Does not validate that periods are unique in the repository.
    """

    def __init__(
        self,
        repository: BudgetRepository,
        calendar: ReferenceCalendar | None = None,
        clock: Clock | None = None,
    ):
        self._repository = repository
        self._calendar = calendar or DEFAULT_CALENDAR
        self._clock = clock or SystemClock()

    @property
    def calendar(self) -> ReferenceCalendar:
        return self._calendar

    @traced_engine("proration", "1.0", fingerprint_fields=("start", "end"))
    def total_amount(self, start: date | datetime, end: date | datetime) -> Decimal:
        """
        Total budget attributable to the inclusive interval [start, end].

        Preconditions:
            start and end are dates or datetimes; time of day is ignored
            after conversion to the reference calendar.

        Postconditions:
            Returns the unrounded sum of daily_rate x overlap days over all
            overlapping months; Decimal("0") when start > end or nothing
            overlaps.

        Args:
            start: First day of the interval (inclusive)
            end: Last day of the interval (inclusive)

        Returns:
            Decimal total, unrounded
        """
        shares = self._prorate(start, end)
        result = self._to_decimal(sum((share.amount for share in shares), Fraction(0)))

        logger.info("total_amount_calculated", extra={
            "months": len(shares),
            "total_amount": str(result),
        })
        return result

    @traced_engine("proration.breakdown", "1.0", fingerprint_fields=("start", "end"))
    def breakdown(self, start: date | datetime, end: date | datetime) -> list[ProrationLine]:
        """
        Per-month shares of ``total_amount(start, end)``.

        Returns an empty list wherever ``total_amount`` returns zero because
        the interval is reversed or nothing overlaps.
        """
        return [
            ProrationLine(
                period=share.span.record.period,
                window_start=share.window_start,
                window_end=share.window_end,
                days=share.days,
                days_in_month=share.span.days_in_month,
                daily_rate=self._to_decimal(share.span.daily_rate),
                amount=self._to_decimal(share.amount),
                is_fallback=share.span.is_fallback,
            )
            for share in self._prorate(start, end)
        ]

    # ------------------------------------------------------------------
    # Algorithm
    # ------------------------------------------------------------------

    def _prorate(self, start: date | datetime, end: date | datetime) -> list[_Share]:
        first = to_calendar_day(start, self._calendar)
        last = to_calendar_day(end, self._calendar)
        logger.info("proration_started", extra={
            "start": first.isoformat(),
            "end": last.isoformat(),
        })

        if first > last:
            logger.info("proration_invalid_interval", extra={
                "start": first.isoformat(),
                "end": last.isoformat(),
            })
            return []

        spans = [self._resolve(record) for record in self._repository.get_all()]
        overlapping = [
            span for span in spans
            if span.last_day >= first and span.first_day <= last
        ]
        if not overlapping:
            logger.info("proration_no_overlap", extra={
                "start": first.isoformat(),
                "end": last.isoformat(),
                "records": len(spans),
            })
            return []

        # Stable sort; the first window is trimmed only at the end, the last
        # only at the start
        overlapping.sort(key=lambda span: span.year_month)

        shares: list[_Share] = []
        count = len(overlapping)
        for index, span in enumerate(overlapping):
            if count == 1:
                lo, hi = first, last
            elif index == 0:
                lo, hi = first, span.last_day
            elif index == count - 1:
                lo, hi = span.first_day, last
            else:
                lo, hi = span.first_day, span.last_day

            days = inclusive_day_count(lo, hi)
            shares.append(_Share(
                span=span,
                window_start=lo,
                window_end=hi,
                days=days,
                amount=span.daily_rate * days,
            ))

            logger.debug("month_share_calculated", extra={
                "period": span.record.period,
                "window_start": lo.isoformat(),
                "window_end": hi.isoformat(),
                "days": days,
                "days_in_month": span.days_in_month,
            })

        return shares

    def _resolve(self, record: BudgetRecord) -> _MonthSpan:
        """Place a record on the calendar, anchoring bad periods to the current month."""
        try:
            year_month = parse_period(record.period)
        except PeriodParseError as exc:
            current = today(self._clock, self._calendar)
            logger.warning("budget_period_unparseable", extra={
                "period": repr(record.period),
                "reason": exc.reason,
                "anchored_to": str(YearMonth.from_date(current)),
                "fallback_days": self._calendar.fallback_days_in_month,
            })
            return _MonthSpan(
                record=record,
                year_month=YearMonth.from_date(current),
                days_in_month=self._calendar.fallback_days_in_month,
                is_fallback=True,
            )
        return _MonthSpan(
            record=record,
            year_month=year_month,
            days_in_month=year_month.days,
            is_fallback=False,
        )

    def _to_decimal(self, value: Fraction) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = self._calendar.decimal_precision
            return Decimal(value.numerator) / Decimal(value.denominator)
