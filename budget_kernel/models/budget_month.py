"""
Module: budget_kernel.models.budget_month
Responsibility: ORM persistence for monthly budget allocations.
Architecture position: Kernel > Models.  May import from db/base.py and the
    domain value it converts to.

Invariants enforced:
    - period is unique (uq_budget_month_period): one allocation per month.
    - amount is stored as Numeric(38, 9), never float.

Failure modes:
    - IntegrityError on a second row for the same period.
"""

from decimal import Decimal

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import Base
from budget_kernel.domain.budget import BudgetRecord


class BudgetMonth(Base):
    """
    Stored budget for one calendar month.

    Non-goals:
        - Period format is validated by the domain parser at read time, not
          by a database constraint.
    """

    __tablename__ = "budget_months"

    __table_args__ = (
        UniqueConstraint("period", name="uq_budget_month_period"),
    )

    # "YYYYMM", e.g. "202308"
    period: Mapped[str] = mapped_column(
        String(6),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(
        nullable=False,
    )

    @classmethod
    def from_record(cls, record: BudgetRecord) -> "BudgetMonth":
        return cls(period=record.period, amount=record.amount)

    def to_record(self) -> BudgetRecord:
        """Frozen domain DTO for this row."""
        return BudgetRecord(period=self.period, amount=self.amount)

    def __repr__(self) -> str:
        return f"<BudgetMonth {self.period}: {self.amount}>"
