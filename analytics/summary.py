"""Income, expense and category totals over a transactions frame."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Literal

import pandas as pd

from core.formatting import month_key
from core.models import TotalsSummary

__all__ = [
    "DateRange",
    "RANGE_LABELS",
    "category_breakdown",
    "compute_totals",
    "expense_by_category",
    "expense_by_month",
    "filter_by_range",
    "split_totals",
]

DateRange = Literal["week", "month", "all"]

RANGE_LABELS: dict[str, str] = {
    "week": "Last 7 Days",
    "month": "This Month",
    "all": "All Time",
}


def split_totals(df: pd.DataFrame) -> tuple[float, float]:
    """Return ``(income, expenses)`` for the given rows."""

    if df.empty:
        return 0.0, 0.0
    income = float(df.loc[df["type"] == "income", "amount"].sum())
    expenses = float(df.loc[df["type"] == "expense", "amount"].sum())
    return income, expenses


def compute_totals(df: pd.DataFrame, today: date | None = None) -> TotalsSummary:
    """All-time and current-month income, expenses and net savings."""

    today = today or date.today()
    income, expenses = split_totals(df)
    current_month = month_key(today)
    monthly = df[df["month"] == current_month] if not df.empty else df
    monthly_income, monthly_expenses = split_totals(monthly)

    return {
        "income": income,
        "expenses": expenses,
        "savings": income - expenses,
        "monthly_income": monthly_income,
        "monthly_expenses": monthly_expenses,
        "monthly_savings": monthly_income - monthly_expenses,
    }


def _week_bounds(today: date) -> tuple[date, date]:
    # Weeks run Sunday to Saturday.
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def filter_by_range(df: pd.DataFrame, date_range: str, today: date | None = None) -> pd.DataFrame:
    """Keep rows in the current week, the current month, or everything."""

    if df.empty or date_range == "all":
        return df

    today = today or date.today()
    if date_range == "week":
        start, end = _week_bounds(today)
    elif date_range == "month":
        period = pd.Period(today, freq="M")
        start, end = period.start_time.date(), period.end_time.date()
    else:
        raise ValueError(f"Unknown date range: {date_range}")

    mask = (df["date"] >= pd.Timestamp(start)) & (df["date"] <= pd.Timestamp(end))
    return df[mask]


def expense_by_category(df: pd.DataFrame) -> pd.Series:
    """Expense totals per category, largest first."""

    expenses = df[df["type"] == "expense"] if not df.empty else df
    if expenses.empty:
        return pd.Series(dtype=float, name="amount")
    return expenses.groupby("category")["amount"].sum().sort_values(ascending=False)


def category_breakdown(df: pd.DataFrame) -> pd.DataFrame:
    """Expense totals per category with their share of all expenses."""

    totals = expense_by_category(df)
    if totals.empty:
        return pd.DataFrame(columns=["Category", "Amount", "Share"])

    grand_total = float(totals.sum())
    breakdown = totals.rename("Amount").rename_axis("Category").reset_index()
    breakdown["Share"] = breakdown["Amount"] / grand_total if grand_total > 0 else 0.0
    return breakdown


def expense_by_month(df: pd.DataFrame) -> pd.DataFrame:
    """Expense totals per ``YYYY-MM`` month in calendar order, labelled ``MM/YY``."""

    expenses = df[df["type"] == "expense"] if not df.empty else df
    if expenses.empty:
        return pd.DataFrame(columns=["Month", "Label", "Amount"])

    monthly = expenses.groupby("month")["amount"].sum().sort_index()
    frame = monthly.rename("Amount").rename_axis("Month").reset_index()
    frame["Label"] = frame["Month"].str[5:] + "/" + frame["Month"].str[2:4]
    return frame[["Month", "Label", "Amount"]]
