"""Pure domain layer of the budget kernel: records, calendar, clock, repository."""

from budget_kernel.domain.budget import BudgetRecord
from budget_kernel.domain.calendar import (
    DEFAULT_CALENDAR,
    ReferenceCalendar,
    YearMonth,
    days_between,
    days_in_month,
    first_day_of_period,
    inclusive_day_count,
    last_day_of_period,
    parse_period,
    start_of_day,
    to_calendar_day,
)
from budget_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from budget_kernel.domain.repository import BudgetRepository, InMemoryBudgetRepository

__all__ = [
    "BudgetRecord",
    "BudgetRepository",
    "Clock",
    "DEFAULT_CALENDAR",
    "DeterministicClock",
    "InMemoryBudgetRepository",
    "ReferenceCalendar",
    "SystemClock",
    "YearMonth",
    "days_between",
    "days_in_month",
    "first_day_of_period",
    "inclusive_day_count",
    "last_day_of_period",
    "parse_period",
    "start_of_day",
    "to_calendar_day",
]
