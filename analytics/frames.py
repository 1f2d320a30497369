"""Conversion of transaction records into analysis-ready dataframes."""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from core.models import Transaction

__all__ = ["TRANSACTION_COLUMNS", "empty_frame", "transactions_frame"]

TRANSACTION_COLUMNS: tuple[str, ...] = ("id", "date", "type", "category", "amount", "notes", "month")


def empty_frame() -> pd.DataFrame:
    df = pd.DataFrame({column: pd.Series(dtype="object") for column in TRANSACTION_COLUMNS})
    df["date"] = pd.to_datetime(df["date"])
    df["amount"] = df["amount"].astype(float)
    return df


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Return one row per transaction with a parsed date and ``YYYY-MM`` month key."""

    records = [
        {
            "id": txn.id,
            "date": txn.date,
            "type": txn.type,
            "category": txn.category,
            "amount": float(txn.amount),
            "notes": txn.notes,
        }
        for txn in transactions
    ]
    if not records:
        return empty_frame()

    df = pd.DataFrame.from_records(records)
    df["date"] = pd.to_datetime(df["date"], errors="coerce").dt.normalize()
    df = df.dropna(subset=["date"])
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0.0)
    df["month"] = df["date"].dt.strftime("%Y-%m")
    return df.reset_index(drop=True)
