"""Shared data model definitions for BudgetMate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Literal, Mapping, TypedDict

import pandas as pd

TransactionType = Literal["income", "expense"]

EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Food",
    "Rent",
    "Transport",
    "Utilities",
    "Entertainment",
    "Health",
    "Shopping",
    "Other",
)

INCOME_CATEGORIES: tuple[str, ...] = (
    "Salary",
    "Freelance",
    "Business",
    "Investment",
    "Gift",
    "Other",
)

CURRENCIES: tuple[tuple[str, str], ...] = (
    ("PKR", "Pakistani Rupee"),
    ("AED", "Dubai Dirham"),
    ("$", "US Dollar"),
    ("€", "Euro"),
    ("£", "British Pound"),
    ("₹", "Indian Rupee"),
    ("C$", "Canadian Dollar"),
    ("A$", "Australian Dollar"),
)

CHARITY_PERCENTAGES: tuple[float, ...] = (2.5, 5.0, 10.0, 15.0)
QUICK_DONATIONS: tuple[int, ...] = (100, 500, 1000)
GOAL_QUICK_CONTRIBUTIONS: tuple[int, ...] = (25, 50, 100)


def categories_for(kind: str) -> tuple[str, ...]:
    return INCOME_CATEGORIES if kind == "income" else EXPENSE_CATEGORIES


def _parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        timestamp = pd.Timestamp(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(timestamp):
        return None
    return timestamp.date()


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        timestamp = pd.Timestamp(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(timestamp):
        return None
    return timestamp.to_pydatetime()


def _float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AuthUser":
        return cls(id=_text(row.get("id")), email=_text(row.get("email")))


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    user: AuthUser
    refresh_token: str | None = None


@dataclass(frozen=True)
class Transaction:
    id: str
    user_id: str
    amount: float
    type: TransactionType
    category: str
    date: date
    notes: str = ""
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Transaction":
        kind = _text(row.get("type")).lower()
        return cls(
            id=_text(row.get("id")),
            user_id=_text(row.get("user_id")),
            amount=_float(row.get("amount")),
            type="income" if kind == "income" else "expense",
            category=_text(row.get("category")) or "Other",
            date=_parse_date(row.get("date")) or date.today(),
            notes=_text(row.get("notes")),
            created_at=_parse_datetime(row.get("created_at")),
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "amount": self.amount,
            "type": self.type,
            "category": self.category,
            "date": self.date.isoformat(),
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class Budget:
    id: str
    user_id: str
    category: str
    monthly_limit: float
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Budget":
        return cls(
            id=_text(row.get("id")),
            user_id=_text(row.get("user_id")),
            category=_text(row.get("category")),
            monthly_limit=_float(row.get("monthly_limit")),
            created_at=_parse_datetime(row.get("created_at")),
            updated_at=_parse_datetime(row.get("updated_at")),
        )


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    user_id: str
    title: str
    target_amount: float
    current_amount: float
    target_date: date
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.current_amount >= self.target_amount

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SavingsGoal":
        return cls(
            id=_text(row.get("id")),
            user_id=_text(row.get("user_id")),
            title=_text(row.get("title")),
            target_amount=_float(row.get("target_amount")),
            current_amount=_float(row.get("current_amount")),
            target_date=_parse_date(row.get("target_date")) or date.today(),
            created_at=_parse_datetime(row.get("created_at")),
            updated_at=_parse_datetime(row.get("updated_at")),
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "target_amount": self.target_amount,
            "current_amount": self.current_amount,
            "target_date": self.target_date.isoformat(),
        }


@dataclass(frozen=True)
class UserSettings:
    id: str = ""
    user_id: str = ""
    dark_mode: bool = True
    currency: str = "PKR"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UserSettings":
        return cls(
            id=_text(row.get("id")),
            user_id=_text(row.get("user_id")),
            dark_mode=bool(row.get("dark_mode", True)),
            currency=_text(row.get("currency")) or "PKR",
            created_at=_parse_datetime(row.get("created_at")),
            updated_at=_parse_datetime(row.get("updated_at")),
        )

    def to_row(self) -> dict[str, Any]:
        return {"dark_mode": self.dark_mode, "currency": self.currency}


@dataclass(frozen=True)
class CharityDonation:
    id: str
    user_id: str
    amount: float
    month_year: str
    donated_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CharityDonation":
        return cls(
            id=_text(row.get("id")),
            user_id=_text(row.get("user_id")),
            amount=_float(row.get("amount")),
            month_year=_text(row.get("month_year")),
            donated_at=_parse_datetime(row.get("donated_at")),
            created_at=_parse_datetime(row.get("created_at")),
        )


@dataclass(frozen=True)
class UserProfile:
    id: str
    user_id: str
    username: str | None = None
    username_last_updated: datetime | None = None
    currency_changed: bool = False
    currency_change_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UserProfile":
        username = row.get("username")
        return cls(
            id=_text(row.get("id")),
            user_id=_text(row.get("user_id")),
            username=str(username) if username else None,
            username_last_updated=_parse_datetime(row.get("username_last_updated")),
            currency_changed=bool(row.get("currency_changed", False)),
            currency_change_date=_parse_datetime(row.get("currency_change_date")),
            created_at=_parse_datetime(row.get("created_at")),
            updated_at=_parse_datetime(row.get("updated_at")),
        )


@dataclass
class FinanceSnapshot:
    """Everything loaded for the signed-in user in one pass."""

    transactions: list[Transaction] = field(default_factory=list)
    budgets: dict[str, float] = field(default_factory=dict)
    goals: list[SavingsGoal] = field(default_factory=list)
    donations: list[CharityDonation] = field(default_factory=list)
    settings: UserSettings = field(default_factory=UserSettings)
    profile: UserProfile | None = None

    @property
    def username(self) -> str:
        if self.profile and self.profile.username:
            return self.profile.username
        return "friend"


class TotalsSummary(TypedDict):
    income: float
    expenses: float
    savings: float
    monthly_income: float
    monthly_expenses: float
    monthly_savings: float


class BudgetRow(TypedDict):
    category: str
    spent: float
    limit: float
    percentage: float
    status: str


class OverspendRow(TypedDict):
    category: str
    spent: float
    limit: float
    overspent: float


class CharitySummary(TypedDict):
    month: str
    monthly_income: float
    percentage: float
    suggested: float
    donated: float
    remaining: float
    completed: bool


class MonthRow(TypedDict):
    month: str
    month_number: int
    income: float
    expenses: float
    savings: float
    transaction_count: int
    is_current_month: bool


class YearSummary(TypedDict):
    totals: dict[str, float]
    averages: dict[str, float]
    best_month: MonthRow
    worst_month: MonthRow


__all__ = [
    "AuthSession",
    "AuthUser",
    "Budget",
    "BudgetRow",
    "CHARITY_PERCENTAGES",
    "CURRENCIES",
    "CharityDonation",
    "CharitySummary",
    "EXPENSE_CATEGORIES",
    "FinanceSnapshot",
    "GOAL_QUICK_CONTRIBUTIONS",
    "INCOME_CATEGORIES",
    "MonthRow",
    "OverspendRow",
    "QUICK_DONATIONS",
    "SavingsGoal",
    "TotalsSummary",
    "Transaction",
    "TransactionType",
    "UserProfile",
    "UserSettings",
    "YearSummary",
    "categories_for",
]
