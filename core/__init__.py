"""Core domain package for the BudgetMate application."""

from .formatting import format_currency, format_date, month_key, month_label
from .models import (
    CHARITY_PERCENTAGES,
    CURRENCIES,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    AuthSession,
    AuthUser,
    CharityDonation,
    FinanceSnapshot,
    SavingsGoal,
    Transaction,
    UserProfile,
    UserSettings,
)
from .validation import ValidationError

__all__ = [
    "AuthSession",
    "AuthUser",
    "CHARITY_PERCENTAGES",
    "CURRENCIES",
    "CharityDonation",
    "EXPENSE_CATEGORIES",
    "FinanceSnapshot",
    "INCOME_CATEGORIES",
    "SavingsGoal",
    "Transaction",
    "UserProfile",
    "UserSettings",
    "ValidationError",
    "format_currency",
    "format_date",
    "month_key",
    "month_label",
]
