"""
Module: budget_kernel.selectors.budget_selector
Responsibility: Read-only BudgetRepository backed by the budget_months table.
Architecture position: Kernel > Selectors.  May import from db/, models/ and
    the domain DTO it returns.

Invariants enforced:
    - Read-only access: the selector never calls session.add(), delete(),
      flush() or commit().
    - DTO return convention: returns frozen BudgetRecord values, never ORM
      instances.
    - Session ownership: the caller owns the session and its transaction
      scope.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from budget_kernel.domain.budget import BudgetRecord
from budget_kernel.logging_config import get_logger
from budget_kernel.models.budget_month import BudgetMonth

logger = get_logger("selectors.budget")


class BudgetSelector:
    """
    BudgetRepository over a SQLAlchemy session.

    Contract:
        Each ``get_all()`` call re-queries the table, so the engine always
        sees a fresh snapshot.  Row order is not significant.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_all(self) -> list[BudgetRecord]:
        rows = self.session.execute(select(BudgetMonth)).scalars().all()
        records = [row.to_record() for row in rows]
        logger.debug("budget_records_loaded", extra={"count": len(records)})
        return records

    def get_by_period(self, period: str) -> BudgetRecord | None:
        """Return the record for one period, or None if it has no budget."""
        row = self.session.execute(
            select(BudgetMonth).where(BudgetMonth.period == period)
        ).scalar_one_or_none()
        return row.to_record() if row is not None else None
