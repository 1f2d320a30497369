"""Month-by-month income and expense comparison for a calendar year."""

from __future__ import annotations

import calendar
from datetime import date

import pandas as pd

from core.models import MonthRow, YearSummary

__all__ = [
    "available_years",
    "monthly_comparison",
    "previous_year",
    "year_summary",
]


def available_years(df: pd.DataFrame, today: date | None = None) -> list[int]:
    """The current year plus every year that has transactions, newest first."""

    years = {(today or date.today()).year}
    if not df.empty:
        years.update(int(year) for year in df["date"].dt.year.unique())
    return sorted(years, reverse=True)


def monthly_comparison(df: pd.DataFrame, year: int, today: date | None = None) -> list[MonthRow]:
    today = today or date.today()
    in_year = df[df["date"].dt.year == year] if not df.empty else df

    rows: list[MonthRow] = []
    for month_number in range(1, 13):
        month_rows = in_year[in_year["date"].dt.month == month_number] if not in_year.empty else in_year
        if month_rows.empty:
            income = expenses = 0.0
        else:
            income = float(month_rows.loc[month_rows["type"] == "income", "amount"].sum())
            expenses = float(month_rows.loc[month_rows["type"] == "expense", "amount"].sum())
        rows.append(
            {
                "month": calendar.month_abbr[month_number],
                "month_number": month_number,
                "income": income,
                "expenses": expenses,
                "savings": income - expenses,
                "transaction_count": int(len(month_rows)),
                "is_current_month": year == today.year and month_number == today.month,
            }
        )
    return rows


def year_summary(monthly: list[MonthRow]) -> YearSummary:
    """Year totals, averages over months with data, and best/worst savings months."""

    totals = {
        "income": float(sum(row["income"] for row in monthly)),
        "expenses": float(sum(row["expenses"] for row in monthly)),
        "savings": float(sum(row["savings"] for row in monthly)),
    }
    months_with_data = sum(1 for row in monthly if row["transaction_count"] > 0)
    if months_with_data:
        averages = {key: value / months_with_data for key, value in totals.items()}
    else:
        averages = {"income": 0.0, "expenses": 0.0, "savings": 0.0}

    # Ties keep the earliest month.
    best = monthly[0]
    worst = monthly[0]
    for row in monthly[1:]:
        if row["savings"] > best["savings"]:
            best = row
        if row["savings"] < worst["savings"]:
            worst = row

    return {"totals": totals, "averages": averages, "best_month": best, "worst_month": worst}


def previous_year(df: pd.DataFrame, year: int, today: date | None = None) -> list[MonthRow] | None:
    """The prior year's monthly rows, or ``None`` when it has no transactions."""

    if df.empty or not (df["date"].dt.year == year - 1).any():
        return None
    return monthly_comparison(df, year - 1, today)
