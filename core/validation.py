"""Form validation rules shared by the Streamlit views."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

from core.models import categories_for

__all__ = [
    "GoalForm",
    "SnapshotImport",
    "TransactionForm",
    "ValidationError",
    "auth_error_message",
    "parse_amount",
    "validate_goal",
    "validate_positive_amount",
    "validate_sign_in",
    "validate_sign_up",
    "validate_snapshot",
    "validate_transaction",
    "validate_username",
]

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


class ValidationError(ValueError):
    """Raised when user input fails validation. The message is user facing."""


@dataclass(frozen=True)
class TransactionForm:
    amount: float
    type: str
    category: str
    date: date
    notes: str


@dataclass(frozen=True)
class GoalForm:
    title: str
    target_amount: float
    current_amount: float
    target_date: date


@dataclass(frozen=True)
class SnapshotImport:
    """An exported snapshot checked and normalised before anything is written.

    A section is ``None`` when the file does not carry it and the stored data
    for that section is left untouched.
    """

    transactions: list[dict[str, Any]] | None = None
    budgets: dict[str, float] | None = None
    goals: list[dict[str, Any]] | None = None
    dark_mode: bool | None = None


def parse_amount(raw: Any) -> float | None:
    """Return ``raw`` as a float, or ``None`` when it is blank or not numeric."""

    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", "")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def validate_sign_up(email: str, password: str, confirm_password: str) -> str:
    email = (email or "").strip()
    if not email or not password or not confirm_password:
        raise ValidationError("Please fill in all fields")
    if "@" not in email:
        raise ValidationError("Please enter a valid email address")
    if password != confirm_password:
        raise ValidationError("Passwords do not match")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 6 characters long")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email address")
    return email


def validate_sign_in(email: str, password: str) -> str:
    email = (email or "").strip()
    if not email or not password:
        raise ValidationError("Please fill in all fields")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email address")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 6 characters long")
    return email


def validate_transaction(
    amount: Any,
    kind: str,
    category: str,
    on: date | None = None,
    notes: str = "",
) -> TransactionForm:
    if kind not in ("income", "expense"):
        raise ValidationError("Transaction type must be income or expense")
    if amount in (None, "") or not category:
        raise ValidationError("Please fill in all required fields")

    value = parse_amount(amount)
    if value is None or value <= 0:
        raise ValidationError("Please enter a valid amount")
    if category not in categories_for(kind):
        raise ValidationError(f"Unknown {kind} category: {category}")

    return TransactionForm(
        amount=value,
        type=kind,
        category=category,
        date=on or date.today(),
        notes=(notes or "").strip(),
    )


def validate_goal(
    title: str,
    target_amount: Any,
    current_amount: Any,
    target_date: date | None,
    today: date | None = None,
) -> GoalForm:
    title = (title or "").strip()
    if not title or target_amount in (None, "") or target_date is None:
        raise ValidationError("Please fill in all required fields")

    target = parse_amount(target_amount)
    if target is None or target <= 0:
        raise ValidationError("Please enter a valid target amount greater than 0")

    current = parse_amount(current_amount)
    if current_amount in (None, ""):
        current = 0.0
    if current is None or current < 0:
        raise ValidationError("Current amount must be a valid number (0 or greater)")
    if current > target:
        raise ValidationError("Current amount cannot be greater than target amount")

    if target_date < (today or date.today()):
        raise ValidationError("Target date must be today or in the future")

    return GoalForm(title=title, target_amount=target, current_amount=current, target_date=target_date)


def validate_positive_amount(raw: Any, message: str = "Please enter a valid amount") -> float:
    value = parse_amount(raw)
    if value is None or value <= 0:
        raise ValidationError(message)
    return value


def validate_username(raw: str) -> str:
    username = (raw or "").strip()
    if not username:
        raise ValidationError("Please enter a valid username.")
    return username


_SIGN_IN_MESSAGES = (
    ("Invalid login credentials", "Invalid email or password. Please check your credentials and try again."),
    ("Email not confirmed", "Please check your email and confirm your account before signing in."),
    ("Too many requests", "Too many login attempts. Please wait a moment and try again."),
)

_SIGN_UP_MESSAGES = (
    ("already registered", "An account already exists with this email address. Please use a different one."),
    ("already been registered", "An account already exists with this email address. Please use a different one."),
    ("Password should be at least", "Password must be at least 6 characters long."),
    ("Invalid email", "Please enter a valid email address."),
)


def auth_error_message(error: Exception | str, *, signing_up: bool = False) -> str:
    """Translate a backend auth failure into the message shown to the user."""

    raw = str(error)
    for needle, message in _SIGN_UP_MESSAGES if signing_up else _SIGN_IN_MESSAGES:
        if needle in raw:
            return message
    if raw:
        return raw
    if signing_up:
        return "Failed to create account. Please try again."
    return "Failed to sign in. Please try again."


INVALID_SNAPSHOT = "Invalid file format. Please select a valid JSON file."


def _snapshot_date(raw: Any, what: str) -> date:
    try:
        return date.fromisoformat(str(raw)[:10])
    except ValueError as exc:
        raise ValidationError(f"{INVALID_SNAPSHOT} ({what} has an invalid date)") from exc


def _snapshot_list(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]] | None:
    items = data.get(key)
    if items is None:
        return None
    if not isinstance(items, list) or not all(isinstance(item, Mapping) for item in items):
        raise ValidationError(f"{INVALID_SNAPSHOT} ('{key}' must be a list of records)")
    return items


def _snapshot_transaction(item: Mapping[str, Any], position: int) -> dict[str, Any]:
    what = f"transaction {position}"
    amount = parse_amount(item.get("amount"))
    if amount is None or amount <= 0:
        raise ValidationError(f"{INVALID_SNAPSHOT} ({what} has an invalid amount)")
    kind = item.get("type") or "expense"
    if kind not in ("income", "expense"):
        raise ValidationError(f"{INVALID_SNAPSHOT} ({what} has an unknown type)")
    raw_date = item.get("date")
    return {
        "amount": amount,
        "type": kind,
        "category": str(item.get("category") or "Other"),
        "date": (_snapshot_date(raw_date, what) if raw_date else date.today()).isoformat(),
        "notes": str(item.get("notes") or ""),
    }


def _snapshot_goal(item: Mapping[str, Any], position: int) -> dict[str, Any]:
    what = f"goal {position}"
    title = str(item.get("title") or "").strip()
    target = parse_amount(item.get("target_amount"))
    current = parse_amount(item.get("current_amount") or 0)
    if not title:
        raise ValidationError(f"{INVALID_SNAPSHOT} ({what} has no title)")
    if target is None or target <= 0 or current is None or current < 0:
        raise ValidationError(f"{INVALID_SNAPSHOT} ({what} has an invalid amount)")
    return {
        "title": title,
        "target_amount": target,
        "current_amount": current,
        "target_date": _snapshot_date(item.get("target_date"), what).isoformat(),
    }


def validate_snapshot(data: Any) -> SnapshotImport:
    """Check a whole export file up front so a bad file writes nothing."""

    if isinstance(data, SnapshotImport):
        return data
    if not isinstance(data, Mapping):
        raise ValidationError(INVALID_SNAPSHOT)

    transactions = _snapshot_list(data, "transactions")
    goals = _snapshot_list(data, "goals")

    budgets = data.get("budgets")
    limits: dict[str, float] | None = None
    if budgets is not None:
        if not isinstance(budgets, Mapping):
            raise ValidationError(f"{INVALID_SNAPSHOT} ('budgets' must map categories to limits)")
        limits = {}
        for category, raw in budgets.items():
            limit = parse_amount(raw)
            if limit is None or limit < 0:
                raise ValidationError(f"{INVALID_SNAPSHOT} (budget for {category} is not a valid amount)")
            limits[str(category)] = limit

    settings = data.get("settings")
    dark_mode = None
    if settings is not None:
        if not isinstance(settings, Mapping):
            raise ValidationError(f"{INVALID_SNAPSHOT} ('settings' must be a record)")
        if settings.get("dark_mode") is not None:
            dark_mode = bool(settings["dark_mode"])

    return SnapshotImport(
        transactions=(
            None
            if transactions is None
            else [_snapshot_transaction(item, number) for number, item in enumerate(transactions, start=1)]
        ),
        budgets=limits,
        goals=None if goals is None else [_snapshot_goal(item, number) for number, item in enumerate(goals, start=1)],
        dark_mode=dark_mode,
    )
