"""Formatting helpers for BudgetMate views and reports."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import pandas as pd

__all__ = ["format_currency", "format_date", "format_signed", "month_key", "month_label"]


def format_currency(amount: float, currency: str = "PKR") -> str:
    """Render ``amount`` without sign, two decimals and thousands separators."""

    code = (currency or "PKR").strip()
    prefix = "PKR " if code == "PKR" else code
    return f"{prefix}{abs(float(amount)):,.2f}"


def format_signed(amount: float, kind: str, currency: str = "PKR") -> str:
    sign = "+" if kind == "income" else "-"
    return f"{sign}{format_currency(amount, currency)}"


def _as_timestamp(value: Any) -> pd.Timestamp:
    if isinstance(value, (date, datetime)):
        return pd.Timestamp(value)
    return pd.Timestamp(str(value))


def format_date(value: Any) -> str:
    return _as_timestamp(value).strftime("%b %d, %Y")


def month_key(value: Any) -> str:
    return _as_timestamp(value).strftime("%Y-%m")


def month_label(value: Any) -> str:
    return _as_timestamp(value).strftime("%B %Y")
