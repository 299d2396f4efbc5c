"""
Budget -- Immutable monthly budget record.

Responsibility:
    ``BudgetRecord`` pairs a "YYYYMM" period with the total budget for that
    whole month and derives the month boundaries and the daily rate.

Architecture position:
    Kernel > Domain -- pure data definition with ZERO I/O.  Produced by
    repositories, consumed by the proration engine.

Invariants enforced:
    - Frozen dataclass (immutable after construction).
    - ``amount`` is always a Decimal, never float.
    - Derived values are computed on access, never stored.

Failure modes:
    - InvalidBudgetAmountError on construction with a non-numeric or
      non-finite amount.
    - PeriodParseError from the strict derived properties when the period
      is malformed.  The engine resolves such records through its own
      explicit fallback instead of these properties.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from fractions import Fraction

from budget_kernel.domain.calendar import (
    DEFAULT_CALENDAR,
    ReferenceCalendar,
    YearMonth,
    parse_period,
    start_of_day,
)
from budget_kernel.exceptions import InvalidBudgetAmountError


@dataclass(frozen=True)
class BudgetRecord:
    """
    One month's total budget.

    Contract:
        ``period`` names a calendar month ("202308").  ``amount`` is the
        budget for the entire month.

    Guarantees:
        - Immutable and hashable.
        - ``amount`` is a finite Decimal.
        - ``daily_rate_exact * days_in_month == amount`` exactly.
    """

    period: str
    amount: Decimal

    def __post_init__(self) -> None:
        amount = self.amount
        if isinstance(amount, bool):
            raise InvalidBudgetAmountError(amount)
        if not isinstance(amount, Decimal):
            try:
                amount = Decimal(str(amount))
            except (InvalidOperation, ValueError) as e:
                raise InvalidBudgetAmountError(self.amount) from e
        if not amount.is_finite():
            raise InvalidBudgetAmountError(self.amount)
        object.__setattr__(self, "amount", amount)

    @property
    def year_month(self) -> YearMonth:
        return parse_period(self.period)

    @property
    def first_day_of_period(self) -> date:
        return self.year_month.first_day

    @property
    def last_day_of_period(self) -> date:
        return self.year_month.last_day

    @property
    def days_in_month(self) -> int:
        return self.year_month.days

    @property
    def daily_rate(self) -> Decimal:
        """Amount per day, at the current decimal context precision."""
        return self.amount / Decimal(self.days_in_month)

    @property
    def daily_rate_exact(self) -> Fraction:
        """Amount per day with no rounding at all."""
        return Fraction(self.amount) / self.days_in_month

    def period_bounds(
        self,
        calendar: ReferenceCalendar = DEFAULT_CALENDAR,
    ) -> tuple[datetime, datetime]:
        """Midnight of the first and of the last day of the month, in the reference zone."""
        ym = self.year_month
        return start_of_day(ym.first_day, calendar), start_of_day(ym.last_day, calendar)
