"""Shared fixtures: blank Streamlit secrets, an in-memory table store and sample data."""

from __future__ import annotations

import itertools
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Mapping

import pandas as pd
import pytest
import streamlit as st

from analytics import transactions_frame
from backend import BackendError, FinanceRepository
from config import Settings, get_settings
from core.models import AuthUser, Transaction


@pytest.fixture(autouse=True)
def clear_streamlit_secrets(monkeypatch):
    """Provide an empty secrets mapping so tests don't rely on Streamlit runtime."""

    monkeypatch.setattr(st, "secrets", {}, raising=False)
    for field in Settings.model_fields.values():
        if field.alias:
            monkeypatch.delenv(field.alias, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class InMemoryGateway:
    """Dict-backed stand-in for the hosted table store."""

    def __init__(self, passwords: Mapping[str, str] | None = None) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.passwords = dict(passwords or {})
        self._ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _matches(self, row: Mapping[str, Any], filters: Mapping[str, Any] | None) -> bool:
        return all(row.get(column) == value for column, value in (filters or {}).items())

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        *,
        order: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        rows = [dict(row) for row in self.tables.get(table, []) if self._matches(row, filters)]
        if order:
            rows.sort(key=lambda row: row.get(order) or "", reverse=descending)
        return rows

    def insert(self, table: str, rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        stored = []
        for row in rows:
            self._clock += timedelta(seconds=1)
            record = {"id": str(next(self._ids)), "created_at": self._clock.isoformat(), **row}
            self.tables.setdefault(table, []).append(record)
            stored.append(dict(record))
        return stored

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        filters: Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        updated = []
        for row in self.tables.get(table, []):
            if self._matches(row, filters):
                row.update(values)
                updated.append(dict(row))
        return updated

    def delete(self, table: str, filters: Mapping[str, Any]) -> None:
        if not filters:
            raise BackendError("Refusing to delete without a filter")
        self.tables[table] = [row for row in self.tables.get(table, []) if not self._matches(row, filters)]

    def verify_password(self, email: str, password: str) -> None:
        if self.passwords.get(email) != password:
            raise BackendError("Invalid login credentials", status=400)


@pytest.fixture()
def user() -> AuthUser:
    return AuthUser(id="user-1", email="amina@example.com")


@pytest.fixture()
def gateway(user) -> InMemoryGateway:
    return InMemoryGateway(passwords={user.email: "secret123"})


@pytest.fixture()
def repository(gateway, user) -> FinanceRepository:
    return FinanceRepository(gateway, user)


def _txn(index: int, amount: float, kind: str, category: str, on: str, notes: str = "") -> Transaction:
    return Transaction(
        id=f"t{index}",
        user_id="user-1",
        amount=amount,
        type=kind,  # type: ignore[arg-type]
        category=category,
        date=date.fromisoformat(on),
        notes=notes,
    )


@pytest.fixture()
def sample_transactions() -> list[Transaction]:
    return [
        _txn(1, 5000.0, "income", "Salary", "2024-03-01"),
        _txn(2, 1200.0, "expense", "Rent", "2024-03-02"),
        _txn(3, 300.0, "expense", "Food", "2024-03-03"),
        _txn(4, 150.0, "expense", "Food", "2024-03-06", "groceries"),
        _txn(5, 80.0, "expense", "Transport", "2024-03-10"),
        _txn(6, 4000.0, "income", "Salary", "2024-02-01"),
        _txn(7, 900.0, "expense", "Rent", "2024-02-02"),
        _txn(8, 250.0, "expense", "Entertainment", "2024-02-14"),
        _txn(9, 3000.0, "income", "Freelance", "2023-11-20"),
        _txn(10, 500.0, "expense", "Shopping", "2023-11-25"),
    ]


@pytest.fixture()
def sample_frame(sample_transactions) -> pd.DataFrame:
    return transactions_frame(sample_transactions)
