"""Monthly comparison of income, expenses and savings for one calendar year."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from analytics import available_years, monthly_comparison, previous_year, year_summary
from app.layout import card, page_header
from core.formatting import format_currency
from core.models import FinanceSnapshot, MonthRow
from visualization import build_comparison_chart


def _signed(amount: float, currency: str) -> str:
    return ("-" if amount < 0 else "") + format_currency(amount, currency)


def _year_delta(current: float, previous: float | None, currency: str) -> str | None:
    if previous is None:
        return None
    change = current - previous
    return f"{'+' if change >= 0 else '-'}{format_currency(change, currency)} vs last year"


def _render_highlight(title: str, row: MonthRow, currency: str) -> None:
    suffix = "Current month" if row["is_current_month"] else None
    with card(title, suffix=suffix):
        st.subheader(row["month"])
        st.markdown(f"Savings: **{_signed(row['savings'], currency)}**")


def _table(rows: list[MonthRow], currency: str) -> pd.DataFrame:
    frame = pd.DataFrame.from_records(rows)
    return pd.DataFrame(
        {
            "Month": frame["month"],
            "Income": frame["income"].map(lambda value: format_currency(value, currency)),
            "Expenses": frame["expenses"].map(lambda value: format_currency(value, currency)),
            "Savings": frame["savings"].map(lambda value: _signed(value, currency)),
            "Transactions": frame["transaction_count"],
        }
    )


def render_page(snapshot: FinanceSnapshot, df: pd.DataFrame) -> None:
    """Render the monthly comparison page."""

    currency = snapshot.settings.currency
    page_header("Monthly Comparison", "Compare your income, expenses and savings month by month.")

    years = available_years(df)
    year = st.selectbox("Year", years, index=0, key="comparison_year")

    rows = monthly_comparison(df, year)
    summary = year_summary(rows)
    prior_rows = previous_year(df, year)
    prior = year_summary(prior_rows)["totals"] if prior_rows else None

    cols = st.columns(3)
    for col, key, label in zip(cols, ("income", "expenses", "savings"), ("Income", "Expenses", "Savings")):
        col.metric(
            f"Total {label} ({year})",
            _signed(summary["totals"][key], currency),
            _year_delta(summary["totals"][key], prior[key] if prior else None, currency),
            delta_color="inverse" if key == "expenses" else "normal",
        )
        col.caption(f"Monthly average: {_signed(summary['averages'][key], currency)}")

    with card("Income vs Expenses", suffix=str(year)):
        chart = build_comparison_chart(rows, currency, snapshot.settings.dark_mode)
        st.plotly_chart(chart, use_container_width=True, key="comparison-chart")

    best_col, worst_col = st.columns(2, gap="medium")
    with best_col:
        _render_highlight("Best Savings Month", summary["best_month"], currency)
    with worst_col:
        _render_highlight("Worst Savings Month", summary["worst_month"], currency)

    with card("Monthly Breakdown"):
        st.dataframe(_table(rows, currency), hide_index=True, use_container_width=True)


__all__ = ["render_page"]
