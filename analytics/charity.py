"""Monthly Sadaqah suggestion based on the current month's income."""

from __future__ import annotations

from datetime import date
from typing import Iterable

import pandas as pd

from core.formatting import month_key
from core.models import CharityDonation, CharitySummary

__all__ = ["charity_summary", "donated_in_month"]


def donated_in_month(donations: Iterable[CharityDonation], month: str) -> float:
    return float(sum(donation.amount for donation in donations if donation.month_year == month))


def charity_summary(
    df: pd.DataFrame,
    donations: Iterable[CharityDonation],
    percentage: float = 5.0,
    today: date | None = None,
) -> CharitySummary:
    month = month_key(today or date.today())

    if df.empty:
        monthly_income = 0.0
    else:
        monthly_income = float(df.loc[(df["type"] == "income") & (df["month"] == month), "amount"].sum())

    suggested = monthly_income * percentage / 100
    donated = donated_in_month(donations, month)
    remaining = max(0.0, suggested - donated)

    return {
        "month": month,
        "monthly_income": monthly_income,
        "percentage": float(percentage),
        "suggested": suggested,
        "donated": donated,
        "remaining": remaining,
        "completed": remaining == 0,
    }
