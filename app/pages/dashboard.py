"""Dashboard page: headline totals, charity reminder, recent activity and charts."""

from __future__ import annotations

import html
from datetime import date

import pandas as pd
import streamlit as st

from analytics import category_breakdown, charity_summary, compute_totals, expense_by_month, goals_overview
from app.layout import card, navigate_to, page_header
from core.formatting import format_currency, format_date, format_signed
from core.models import FinanceSnapshot, TotalsSummary
from visualization import build_category_chart, build_monthly_expense_chart

RECENT_LIMIT = 5


def _render_stats(totals: TotalsSummary, snapshot: FinanceSnapshot, currency: str) -> None:
    month_name = date.today().strftime("%B")
    overview = goals_overview(snapshot.goals)

    cols = st.columns(4)
    cols[0].metric(
        "Total Income",
        format_currency(totals["income"], currency),
        f"{format_currency(totals['monthly_income'], currency)} in {month_name}",
    )
    cols[1].metric(
        "Total Expenses",
        format_currency(totals["expenses"], currency),
        f"{format_currency(totals['monthly_expenses'], currency)} in {month_name}",
        delta_color="inverse",
    )
    savings_sign = "-" if totals["savings"] < 0 else ""
    monthly_sign = "-" if totals["monthly_savings"] < 0 else ""
    cols[2].metric(
        "Net Savings",
        f"{savings_sign}{format_currency(totals['savings'], currency)}",
        f"{monthly_sign}{format_currency(totals['monthly_savings'], currency)} in {month_name}",
    )
    cols[3].metric(
        "Goals Progress",
        f"{format_currency(overview['saved'], currency)} / {format_currency(overview['target'], currency)}",
        f"{overview['completed']} completed" if overview["completed"] else None,
        delta_color="off",
    )


def _render_charity_card(df: pd.DataFrame, snapshot: FinanceSnapshot, currency: str, percentage: float) -> None:
    summary = charity_summary(df, snapshot.donations, percentage)
    with card("Monthly Charity (Sadaqah)", suffix=f"{summary['percentage']:g}% of income"):
        left, right = st.columns([3, 1], vertical_alignment="center")
        with left:
            st.subheader(format_currency(summary["remaining"], currency))
            st.caption("Completed! 🎉" if summary["completed"] else "Remaining to donate")
        with right:
            if st.button("Give Sadaqah", use_container_width=True, key="dashboard_charity"):
                navigate_to("charity")
        st.caption(
            "\"Transform your income into blessings. Share your wealth, and watch it multiply "
            "with Allah's mercy.\""
        )


def _render_recent(df: pd.DataFrame, currency: str) -> None:
    with card("Recent Transactions", suffix=date.today().strftime("%B")):
        if df.empty:
            st.info("No transactions yet. Add your first transaction to get started!")
            return
        recent = df.sort_values("date", ascending=False, kind="stable").head(RECENT_LIMIT)
        for row in recent.itertuples(index=False):
            css_class = "bm-amount--income" if row.type == "income" else "bm-amount--expense"
            st.markdown(
                f"<div class='bm-row'><span>{html.escape(row.category)}"
                f"<br><small>{format_date(row.date)}</small></span>"
                f"<span class='{css_class}'>{format_signed(row.amount, row.type, currency)}</span></div>",
                unsafe_allow_html=True,
            )


def render_page(snapshot: FinanceSnapshot, df: pd.DataFrame, charity_percentage: float) -> None:
    """Render the dashboard page."""

    currency = snapshot.settings.currency
    dark_mode = snapshot.settings.dark_mode
    page_header("Dashboard", f"Welcome back, {snapshot.username}. Overview of your financial status.")

    _render_stats(compute_totals(df), snapshot, currency)
    _render_charity_card(df, snapshot, currency, charity_percentage)
    _render_recent(df, currency)

    left, right = st.columns(2, gap="medium")
    with left:
        with card("Expenses by Category"):
            chart = build_category_chart(category_breakdown(df), currency, dark_mode)
            st.plotly_chart(chart, use_container_width=True, key="dashboard-category-donut")
    with right:
        with card("Monthly Expenses"):
            chart = build_monthly_expense_chart(expense_by_month(df), currency, dark_mode)
            st.plotly_chart(chart, use_container_width=True, key="dashboard-monthly-bars")


__all__ = ["render_page"]
