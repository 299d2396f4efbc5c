"""BudgetRepository -- read-only source of monthly budget records.

The proration engine depends only on this protocol.  Concrete sources are
InMemoryBudgetRepository (snapshots, tests) and
budget_kernel.selectors.budget_selector.BudgetSelector (SQLAlchemy).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from budget_kernel.domain.budget import BudgetRecord


@runtime_checkable
class BudgetRepository(Protocol):
    """Protocol for supplying every known monthly budget record.

    Records come back in arbitrary order; an empty list means no data.
    """

    def get_all(self) -> list[BudgetRecord]:
        """Return all budget records."""
        ...


class InMemoryBudgetRepository:
    """BudgetRepository over a fixed snapshot of records."""

    def __init__(self, records: Iterable[BudgetRecord] = ()):
        self._records: tuple[BudgetRecord, ...] = tuple(records)

    def get_all(self) -> list[BudgetRecord]:
        """Return a fresh list so callers cannot alter the snapshot."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)
