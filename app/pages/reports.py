"""Financial reports with range and category filters and PDF download."""

from __future__ import annotations

import logging
from datetime import date

import pandas as pd
import streamlit as st

from analytics import RANGE_LABELS
from app.layout import card, page_header
from core.formatting import format_currency, format_date, format_signed
from core.models import FinanceSnapshot
from core.reports import Report, build_report, report_filename, report_to_pdf
from visualization import build_category_chart

logger = logging.getLogger(__name__)


def _transactions_table(report: Report, currency: str) -> pd.DataFrame:
    frame = report.transactions
    return pd.DataFrame(
        {
            "Date": frame["date"].map(format_date),
            "Category": frame["category"],
            "Type": frame["type"].str.title(),
            "Amount": [format_signed(amount, kind, currency) for amount, kind in zip(frame["amount"], frame["type"])],
            "Notes": frame["notes"],
        }
    )


def render_page(snapshot: FinanceSnapshot, df: pd.DataFrame) -> None:
    """Render the reports page."""

    currency = snapshot.settings.currency
    page_header("Financial Reports", "Filter your transactions and export a PDF report.")

    range_col, category_col = st.columns(2)
    date_range = range_col.selectbox(
        "Date range",
        list(RANGE_LABELS),
        index=1,
        format_func=RANGE_LABELS.get,
        key="report_range",
    )
    categories = ["all", *sorted(df["category"].dropna().unique().tolist())] if not df.empty else ["all"]
    category = category_col.selectbox(
        "Category",
        categories,
        format_func=lambda value: "All Categories" if value == "all" else value,
        key="report_category",
    )

    report = build_report(df, date_range, category)

    cols = st.columns(3)
    cols[0].metric("Total Income", format_currency(report.income, currency))
    cols[1].metric("Total Expenses", format_currency(report.expenses, currency))
    cols[2].metric("Net Savings", ("-" if report.savings < 0 else "") + format_currency(report.savings, currency))

    if not report.breakdown.empty:
        with card("Expense Breakdown by Category", suffix=report.label):
            chart = build_category_chart(report.breakdown, currency, snapshot.settings.dark_mode)
            st.plotly_chart(chart, use_container_width=True, key="report-category-donut")

    with card("Transaction Details", suffix=f"{len(report.transactions)} transactions"):
        if report.is_empty:
            st.info("No transactions found for the selected criteria.")
        else:
            st.dataframe(_transactions_table(report, currency), hide_index=True, use_container_width=True)

    try:
        pdf_bytes = report_to_pdf(report, currency, date.today())
    except Exception:  # pragma: no cover - reportlab layout failures
        logger.exception("PDF export failed")
        st.error("Failed to export report. Please try again.")
        return

    st.download_button(
        "📄 Download PDF Report",
        data=pdf_bytes,
        file_name=report_filename(date_range),
        mime="application/pdf",
        use_container_width=True,
        key="report_download",
    )


__all__ = ["render_page"]
