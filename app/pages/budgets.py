"""Budget planner: per-category monthly limits and this month's usage."""

from __future__ import annotations

import html

import pandas as pd
import streamlit as st

from analytics import budget_progress
from app.layout import card, page_header
from app.state import get_repository, invalidate_snapshot
from backend import BackendError
from core.formatting import format_currency
from core.models import EXPENSE_CATEGORIES, BudgetRow, FinanceSnapshot
from visualization import build_budget_chart

_STATUS_ICONS = {"ok": "🟢", "warning": "🟠", "over": "🔴", "unset": "⚪"}


def _render_limits_form(snapshot: FinanceSnapshot) -> None:
    currency = snapshot.settings.currency
    with st.form("budget_form"):
        limits: dict[str, float] = {}
        cols = st.columns(2)
        for index, category in enumerate(EXPENSE_CATEGORIES):
            limits[category] = cols[index % 2].number_input(
                f"{category} ({currency})",
                min_value=0.0,
                value=float(snapshot.budgets.get(category, 0.0)),
                step=100.0,
                key=f"budget-{category}",
            )
        submitted = st.form_submit_button("Save Budgets", use_container_width=True)

    if not submitted:
        return

    try:
        get_repository().replace_budgets(limits)
    except BackendError as exc:
        st.error(f"Failed to save budgets: {exc}")
        return

    invalidate_snapshot()
    st.toast("Budget limits updated successfully!")
    st.rerun()


def _render_usage_row(row: BudgetRow, currency: str) -> None:
    icon = _STATUS_ICONS[row["status"]]
    st.markdown(
        f"<div class='bm-row'><span>{icon} {html.escape(row['category'])}</span>"
        f"<span>{format_currency(row['spent'], currency)} / {format_currency(row['limit'], currency)}</span></div>",
        unsafe_allow_html=True,
    )
    st.progress(min(max(row["percentage"], 0.0), 100.0) / 100)
    if row["spent"] > row["limit"]:
        st.caption(f"Over budget by {format_currency(row['spent'] - row['limit'], currency)}")
    else:
        st.caption(f"{format_currency(row['limit'] - row['spent'], currency)} remaining")


def render_page(snapshot: FinanceSnapshot, df: pd.DataFrame) -> None:
    """Render the budget planner page."""

    currency = snapshot.settings.currency
    page_header("Budget Planner", "Set monthly spending limits for each category.")
    rows = budget_progress(snapshot.budgets, df)

    left, right = st.columns([2, 3], gap="medium")
    with left:
        with card("Monthly Limits"):
            _render_limits_form(snapshot)
    with right:
        with card("This Month", suffix="Usage"):
            tracked = [row for row in rows if row["limit"] > 0]
            if not tracked:
                st.info("No budgets set yet. Enter a limit for a category to start tracking.")
            for row in tracked:
                _render_usage_row(row, currency)

    if any(row["limit"] > 0 for row in rows):
        with card("Budget Usage"):
            chart = build_budget_chart(rows, snapshot.settings.dark_mode)
            st.plotly_chart(chart, use_container_width=True, key="budget-usage-bars")


__all__ = ["render_page"]
