"""Budget usage and overspend detection."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping

import numpy as np
import pandas as pd

from analytics.summary import expense_by_category
from core.formatting import month_key
from core.models import EXPENSE_CATEGORIES, BudgetRow, OverspendRow

__all__ = [
    "WARNING_THRESHOLD",
    "budget_progress",
    "budget_status",
    "detect_overspending",
    "usage_percentage",
]

WARNING_THRESHOLD = 0.8


def usage_percentage(spent: float, limit: float) -> float:
    """Percent of ``limit`` used, capped at 100 and 0 for unset limits."""

    if limit <= 0:
        return 0.0
    return float(min(spent / limit * 100, 100.0))


def budget_status(spent: float, limit: float) -> str:
    if limit <= 0:
        return "unset"
    if spent >= limit:
        return "over"
    if spent >= limit * WARNING_THRESHOLD:
        return "warning"
    return "ok"


def budget_progress(
    budgets: Mapping[str, float],
    df: pd.DataFrame,
    today: date | None = None,
    categories: Iterable[str] = EXPENSE_CATEGORIES,
) -> list[BudgetRow]:
    """One row per expense category comparing this month's spend to its limit."""

    month = month_key(today or date.today())
    current = df[df["month"] == month] if not df.empty else df
    spent_by_category = expense_by_category(current)

    rows: list[BudgetRow] = []
    for category in categories:
        spent = float(spent_by_category.get(category, 0.0))
        limit = float(budgets.get(category, 0.0) or 0.0)
        rows.append(
            {
                "category": category,
                "spent": spent,
                "limit": limit,
                "percentage": usage_percentage(spent, limit),
                "status": budget_status(spent, limit),
            }
        )
    return rows


def detect_overspending(budgets: Mapping[str, float], df: pd.DataFrame) -> list[OverspendRow]:
    """Categories whose recorded expenses exceed a positive budget limit."""

    if not budgets:
        return []

    spent_by_category = expense_by_category(df)
    frame = pd.DataFrame(
        {
            "category": list(budgets.keys()),
            "limit": [float(value or 0.0) for value in budgets.values()],
        }
    )
    frame["spent"] = frame["category"].map(spent_by_category).fillna(0.0).astype(float)
    frame["overspent"] = np.where(frame["limit"] > 0, frame["spent"] - frame["limit"], 0.0)
    flagged = frame[(frame["limit"] > 0) & (frame["overspent"] > 0)]

    return [
        {
            "category": str(row.category),
            "spent": float(row.spent),
            "limit": float(row.limit),
            "overspent": float(row.overspent),
        }
        for row in flagged.itertuples(index=False)
    ]
