"""
Typed Exception Hierarchy for the Budget Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from BudgetKernelError:

    BudgetKernelError (base)
    |
    +-- PeriodError
    |   +-- PeriodParseError
    |
    +-- BudgetRecordError
    |   +-- InvalidBudgetAmountError
    |
    +-- CalendarConfigError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Period          | PERIOD_PARSE_ERROR          | Period is not a valid "YYYYMM" string
----------------|-----------------------------|-----------------------------------------
Budget record   | INVALID_BUDGET_AMOUNT       | Amount cannot be represented as Decimal
----------------|-----------------------------|-----------------------------------------
Configuration   | CALENDAR_CONFIG_INVALID     | Reference calendar value out of range

===============================================================================
HANDLING PATTERNS
===============================================================================

The proration engine never lets these escape from ``total_amount``: an
unparseable period is a data-quality problem upstream, so the engine catches
PeriodParseError and applies the documented fallback.  Callers that build
records or load configuration catch by type:

    try:
        calendar = get_active_calendar(path)
    except CalendarConfigError as e:
        log.error("bad calendar", extra={"field": e.field, "code": e.code})

Codes are class attributes so they can be read without instantiation.
"""


class BudgetKernelError(Exception):
    """
    Base exception for all budget kernel errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "BUDGET_KERNEL_ERROR"


# Period-related exceptions


class PeriodError(BudgetKernelError):
    """Base exception for period-related errors."""

    code: str = "PERIOD_ERROR"


class PeriodParseError(PeriodError):
    """Period string does not denote a calendar month."""

    code: str = "PERIOD_PARSE_ERROR"

    def __init__(self, period: object, reason: str):
        self.period = period
        self.reason = reason
        super().__init__(f"Cannot parse budget period {period!r}: {reason}")


# Budget record exceptions


class BudgetRecordError(BudgetKernelError):
    """Base exception for budget record construction errors."""

    code: str = "BUDGET_RECORD_ERROR"


class InvalidBudgetAmountError(BudgetRecordError):
    """Amount is not a finite decimal value."""

    code: str = "INVALID_BUDGET_AMOUNT"

    def __init__(self, amount: object):
        self.amount = amount
        super().__init__(f"Invalid budget amount: {amount!r}")


# Configuration exceptions


class CalendarConfigError(BudgetKernelError):
    """Reference calendar configuration is invalid."""

    code: str = "CALENDAR_CONFIG_INVALID"

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid calendar setting {field}={value!r}: {reason}")
