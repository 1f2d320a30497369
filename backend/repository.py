"""Per-user data access on top of the hosted table store."""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, Protocol

from analytics.goals import apply_contribution
from backend.client import BackendError
from core.models import (
    AuthUser,
    Budget,
    CharityDonation,
    FinanceSnapshot,
    SavingsGoal,
    Transaction,
    UserProfile,
    UserSettings,
)
from core.formatting import month_key
from core.validation import SnapshotImport, TransactionForm, ValidationError, validate_snapshot

__all__ = ["FinanceRepository", "TableGateway", "USERNAME_COOLDOWN_DAYS"]

logger = logging.getLogger(__name__)

USERNAME_COOLDOWN_DAYS = 15

TRANSACTIONS = "transactions"
BUDGETS = "budgets"
GOALS = "savings_goals"
SETTINGS = "user_settings"
DONATIONS = "charity_donations"
PROFILES = "user_profiles"


class TableGateway(Protocol):
    """The subset of the hosted store the repository relies on."""

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        *,
        order: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]: ...

    def insert(self, table: str, rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]: ...

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        filters: Mapping[str, Any],
    ) -> list[dict[str, Any]]: ...

    def delete(self, table: str, filters: Mapping[str, Any]) -> None: ...

    def verify_password(self, email: str, password: str) -> None: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _first(rows: list[dict[str, Any]], action: str) -> dict[str, Any]:
    if not rows:
        raise BackendError(f"No row returned while trying to {action}")
    return rows[0]


class FinanceRepository:
    """Loads and mutates one user's transactions, budgets, goals and settings."""

    def __init__(self, gateway: TableGateway, user: AuthUser, default_currency: str = "PKR") -> None:
        self.gateway = gateway
        self.user = user
        self.default_currency = default_currency

    @property
    def _owner(self) -> dict[str, str]:
        return {"user_id": self.user.id}

    def load_snapshot(self) -> FinanceSnapshot:
        """Load everything the views need for the signed-in user."""

        try:
            return FinanceSnapshot(
                transactions=self.load_transactions(),
                budgets=self.load_budgets(),
                goals=self.load_goals(),
                donations=self.load_donations(),
                settings=self.load_settings(),
                profile=self.load_profile(),
            )
        except BackendError:
            logger.exception("Failed to load data for user %s", self.user.id)
            raise

    # Transactions

    def load_transactions(self) -> list[Transaction]:
        rows = self.gateway.select(TRANSACTIONS, self._owner, order="created_at", descending=True)
        return [Transaction.from_row(row) for row in rows]

    def add_transaction(self, form: TransactionForm) -> Transaction:
        row = {
            **self._owner,
            "amount": form.amount,
            "type": form.type,
            "category": form.category,
            "date": form.date.isoformat(),
            "notes": form.notes,
        }
        stored = _first(self.gateway.insert(TRANSACTIONS, [row]), "add transaction")
        logger.info("Added %s transaction of %.2f in %s", form.type, form.amount, form.category)
        return Transaction.from_row(stored)

    def delete_transaction(self, transaction_id: str) -> None:
        self.gateway.delete(TRANSACTIONS, {"id": transaction_id, **self._owner})

    # Budgets

    def load_budgets(self) -> dict[str, float]:
        budgets = [Budget.from_row(row) for row in self.gateway.select(BUDGETS, self._owner)]
        return {budget.category: budget.monthly_limit for budget in budgets}

    def replace_budgets(self, budgets: Mapping[str, float]) -> dict[str, float]:
        """Replace all of the user's budgets; only positive limits are stored."""

        kept = {
            category: float(limit)
            for category, limit in budgets.items()
            if limit is not None and not math.isnan(float(limit)) and float(limit) > 0
        }
        self.gateway.delete(BUDGETS, self._owner)
        if kept:
            self.gateway.insert(
                BUDGETS,
                [{**self._owner, "category": category, "monthly_limit": limit} for category, limit in kept.items()],
            )
        return kept

    # Goals

    def load_goals(self) -> list[SavingsGoal]:
        rows = self.gateway.select(GOALS, self._owner, order="created_at", descending=True)
        return [SavingsGoal.from_row(row) for row in rows]

    def add_goal(
        self,
        title: str,
        target_amount: float,
        target_date: date,
        current_amount: float = 0.0,
    ) -> SavingsGoal:
        row = {
            **self._owner,
            "title": title,
            "target_amount": target_amount,
            "current_amount": current_amount,
            "target_date": target_date.isoformat(),
        }
        return SavingsGoal.from_row(_first(self.gateway.insert(GOALS, [row]), "add goal"))

    def update_goal(self, goal_id: str, **changes: Any) -> SavingsGoal:
        values = {
            key: value.isoformat() if isinstance(value, date) else value
            for key, value in changes.items()
        }
        values["updated_at"] = _utcnow().isoformat()
        rows = self.gateway.update(GOALS, values, {"id": goal_id, **self._owner})
        return SavingsGoal.from_row(_first(rows, "update goal"))

    def contribute_to_goal(self, goal: SavingsGoal, amount: float) -> SavingsGoal:
        new_amount = apply_contribution(goal, amount)
        return self.update_goal(goal.id, current_amount=new_amount)

    def delete_goal(self, goal_id: str) -> None:
        self.gateway.delete(GOALS, {"id": goal_id, **self._owner})

    # Settings & profile

    def load_settings(self) -> UserSettings:
        rows = self.gateway.select(SETTINGS, self._owner)
        if rows:
            return UserSettings.from_row(rows[0])

        defaults = {**self._owner, "dark_mode": True, "currency": self.default_currency}
        created = self.gateway.insert(SETTINGS, [defaults])
        return UserSettings.from_row(created[0] if created else defaults)

    def update_settings(self, **changes: Any) -> UserSettings:
        values = {**changes, "updated_at": _utcnow().isoformat()}
        rows = self.gateway.update(SETTINGS, values, self._owner)
        return UserSettings.from_row(_first(rows, "update settings"))

    def load_profile(self) -> UserProfile:
        rows = self.gateway.select(PROFILES, self._owner)
        if rows:
            return UserProfile.from_row(rows[0])

        username = self.user.email.split("@")[0] if self.user.email else ""
        defaults = {**self._owner, "username": username or "user", "currency_changed": False}
        created = self.gateway.insert(PROFILES, [defaults])
        return UserProfile.from_row(created[0] if created else defaults)

    def update_username(self, profile: UserProfile, username: str, now: datetime | None = None) -> UserProfile:
        """Change the username, at most once every fifteen days."""

        now = now or _utcnow()
        last = profile.username_last_updated
        if last is not None:
            if last.tzinfo is None and now.tzinfo is not None:
                last = last.replace(tzinfo=timezone.utc)
            elapsed_days = (now - last).total_seconds() / 86400
            if elapsed_days < USERNAME_COOLDOWN_DAYS:
                remaining = math.ceil(USERNAME_COOLDOWN_DAYS - elapsed_days)
                raise ValidationError(f"You can update your username again in {remaining} days.")

        rows = self.gateway.update(
            PROFILES,
            {"username": username, "username_last_updated": now.isoformat()},
            self._owner,
        )
        return UserProfile.from_row(_first(rows, "update username"))

    def update_currency(
        self,
        profile: UserProfile,
        currency: str,
        password: str,
        now: datetime | None = None,
    ) -> tuple[UserSettings, UserProfile]:
        """Switch the display currency. Allowed once and only after re-entering the password."""

        if profile.currency_changed:
            raise ValidationError("Currency has already been changed and cannot be modified again.")
        if not password:
            raise ValidationError("Please enter your password to confirm.")

        try:
            self.gateway.verify_password(self.user.email, password)
        except BackendError as exc:
            logger.info("Password check failed for currency change: %s", exc)
            raise ValidationError("Invalid password. Please try again.") from exc

        now = now or _utcnow()
        settings = self.update_settings(currency=currency)
        rows = self.gateway.update(
            PROFILES,
            {"currency_changed": True, "currency_change_date": now.isoformat()},
            self._owner,
        )
        return settings, UserProfile.from_row(_first(rows, "update profile"))

    # Charity

    def load_donations(self) -> list[CharityDonation]:
        rows = self.gateway.select(DONATIONS, self._owner, order="created_at", descending=True)
        return [CharityDonation.from_row(row) for row in rows]

    def add_donation(self, amount: float, today: date | None = None) -> CharityDonation:
        month_year = month_key(today or date.today())
        row = {**self._owner, "amount": amount, "month_year": month_year}
        stored = _first(self.gateway.insert(DONATIONS, [row]), "record donation")
        logger.info("Recorded donation of %.2f for %s", amount, month_year)
        return CharityDonation.from_row(stored)

    # Bulk

    def import_snapshot(self, data: SnapshotImport | Mapping[str, Any]) -> None:
        """Restore an exported snapshot.

        Each section the file carries replaces the stored one; sections it
        omits are left alone. The whole file is validated before any write.
        """

        snapshot = validate_snapshot(data)

        if snapshot.transactions is not None:
            self.gateway.delete(TRANSACTIONS, self._owner)
            if snapshot.transactions:
                self.gateway.insert(TRANSACTIONS, [{**self._owner, **row} for row in snapshot.transactions])

        if snapshot.budgets is not None:
            self.replace_budgets(snapshot.budgets)

        if snapshot.goals is not None:
            self.gateway.delete(GOALS, self._owner)
            if snapshot.goals:
                self.gateway.insert(GOALS, [{**self._owner, **row} for row in snapshot.goals])

        # Currency is excluded: it may only change through update_currency.
        if snapshot.dark_mode is not None:
            self.update_settings(dark_mode=snapshot.dark_mode)

        logger.info(
            "Imported %d transactions and %d goals for user %s",
            len(snapshot.transactions or []),
            len(snapshot.goals or []),
            self.user.id,
        )

    def clear_all_data(self) -> None:
        for table in (TRANSACTIONS, BUDGETS, GOALS):
            self.gateway.delete(table, self._owner)
        logger.info("Cleared transactions, budgets and goals for user %s", self.user.id)
