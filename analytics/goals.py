"""Savings goal progress arithmetic."""

from __future__ import annotations

import math
from datetime import date
from typing import Iterable, TypedDict

from core.models import SavingsGoal
from core.validation import ValidationError

__all__ = [
    "GoalsOverview",
    "apply_contribution",
    "days_remaining",
    "due_phrase",
    "goal_progress",
    "goals_overview",
]


class GoalsOverview(TypedDict):
    saved: float
    target: float
    percentage: float
    completed: int


def goal_progress(current: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return float(min(current / target * 100, 100.0))


def days_remaining(target_date: date, today: date | None = None) -> int:
    return (target_date - (today or date.today())).days


def due_phrase(days: int) -> str:
    if days > 0:
        return f"{days} days left"
    if days == 0:
        return "Due today"
    return f"{abs(days)} days overdue"


def apply_contribution(goal: SavingsGoal, amount: float) -> float:
    """Return the goal's new saved amount after ``amount`` is added, capped at the target."""

    if amount is None or math.isnan(amount) or amount <= 0:
        raise ValidationError("Contribution amount must be greater than 0")

    new_amount = min(goal.current_amount + amount, goal.target_amount)
    if new_amount == goal.current_amount:
        raise ValidationError("Goal is already completed!")
    return new_amount


def goals_overview(goals: Iterable[SavingsGoal]) -> GoalsOverview:
    goal_list = list(goals)
    saved = sum(goal.current_amount for goal in goal_list)
    target = sum(goal.target_amount for goal in goal_list)
    return {
        "saved": float(saved),
        "target": float(target),
        "percentage": float(saved / target * 100) if target > 0 else 0.0,
        "completed": sum(1 for goal in goal_list if goal.is_completed),
    }
