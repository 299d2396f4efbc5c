"""ORM models for the budget kernel."""

from budget_kernel.models.budget_month import BudgetMonth

__all__ = [
    "BudgetMonth",
]
