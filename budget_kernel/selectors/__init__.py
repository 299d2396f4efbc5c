"""Selectors for the budget kernel (read side)."""

from budget_kernel.selectors.budget_selector import BudgetSelector

__all__ = [
    "BudgetSelector",
]
