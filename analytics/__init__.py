"""Analytics helpers shared across BudgetMate views."""

from analytics.budgets import budget_progress, budget_status, detect_overspending, usage_percentage
from analytics.charity import charity_summary, donated_in_month
from analytics.comparison import available_years, monthly_comparison, previous_year, year_summary
from analytics.frames import transactions_frame
from analytics.goals import apply_contribution, days_remaining, due_phrase, goal_progress, goals_overview
from analytics.summary import (
    RANGE_LABELS,
    category_breakdown,
    compute_totals,
    expense_by_category,
    expense_by_month,
    filter_by_range,
)

__all__ = [
    "RANGE_LABELS",
    "apply_contribution",
    "available_years",
    "budget_progress",
    "budget_status",
    "category_breakdown",
    "charity_summary",
    "compute_totals",
    "days_remaining",
    "detect_overspending",
    "donated_in_month",
    "due_phrase",
    "expense_by_category",
    "expense_by_month",
    "filter_by_range",
    "goal_progress",
    "goals_overview",
    "monthly_comparison",
    "previous_year",
    "transactions_frame",
    "usage_percentage",
    "year_summary",
]
