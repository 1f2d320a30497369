"""Visualization utilities for BudgetMate views."""

from .charts import (
    build_budget_chart,
    build_category_chart,
    build_comparison_chart,
    build_goal_chart,
    build_monthly_expense_chart,
)
from .theme import theme_tokens

__all__ = [
    "build_budget_chart",
    "build_category_chart",
    "build_comparison_chart",
    "build_goal_chart",
    "build_monthly_expense_chart",
    "theme_tokens",
]
