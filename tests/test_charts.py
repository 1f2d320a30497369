from __future__ import annotations

from datetime import date

import pandas as pd

from analytics import budget_progress, category_breakdown, expense_by_month, monthly_comparison
from core.models import SavingsGoal
from visualization import (
    build_budget_chart,
    build_category_chart,
    build_comparison_chart,
    build_goal_chart,
    build_monthly_expense_chart,
)

TODAY = date(2024, 3, 12)


def test_category_chart_is_a_donut(sample_frame):
    fig = build_category_chart(category_breakdown(sample_frame), "PKR")

    assert fig.data[0].type == "pie"
    assert fig.data[0].hole == 0.55
    assert len(fig.data[0].labels) == 5


def test_monthly_chart_uses_short_labels(sample_frame):
    fig = build_monthly_expense_chart(expense_by_month(sample_frame))

    assert list(fig.data[0].x) == ["11/23", "02/24", "03/24"]


def test_comparison_chart_has_bars_and_savings_line(sample_frame):
    fig = build_comparison_chart(monthly_comparison(sample_frame, 2024, TODAY))

    assert [trace.name for trace in fig.data] == ["Income", "Expenses", "Savings"]
    assert fig.layout.barmode == "group"


def test_budget_chart_only_shows_set_limits(sample_frame):
    rows = budget_progress({"Food": 500, "Rent": 1000}, sample_frame, TODAY)

    fig = build_budget_chart(rows)

    assert list(fig.data[0].y) == ["Food", "Rent"]


def test_empty_inputs_render_placeholder():
    empty = pd.DataFrame(columns=["Category", "Amount", "Share"])

    fig = build_category_chart(empty)

    assert len(fig.data) == 0
    assert fig.layout.annotations[0].text == "No expenses recorded yet."
    assert len(build_comparison_chart(monthly_comparison(pd.DataFrame(), 2024, TODAY)).data) == 0


def test_goal_chart_stacks_saved_and_remaining():
    goals = [
        SavingsGoal(id="g1", user_id="u", title="Hajj", target_amount=1000, current_amount=250, target_date=TODAY),
        SavingsGoal(id="g2", user_id="u", title="Laptop", target_amount=500, current_amount=600, target_date=TODAY),
    ]

    fig = build_goal_chart(goals, "PKR")

    assert fig.layout.barmode == "stack"
    assert [trace.name for trace in fig.data] == ["Saved", "Remaining"]
    assert list(fig.data[0].x) == [250, 500]
    assert list(fig.data[1].x) == [750, 0.0]
    assert len(build_goal_chart([]).data) == 0
