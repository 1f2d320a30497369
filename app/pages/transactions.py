"""Add-transaction form and the most recent entries with delete buttons."""

from __future__ import annotations

import logging
from datetime import date

import pandas as pd
import streamlit as st

from app.layout import card, page_header
from app.state import get_repository, invalidate_snapshot
from backend import BackendError
from core.formatting import format_date, format_signed
from core.models import FinanceSnapshot, categories_for
from core.validation import ValidationError, validate_transaction

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10


def _render_form(currency: str) -> None:
    kind = st.radio(
        "Type",
        ["expense", "income"],
        format_func=str.title,
        horizontal=True,
        key="transaction_type",
    )
    with st.form("transaction_form", clear_on_submit=True):
        amount = st.text_input(f"Amount ({currency})", placeholder="0.00")
        category = st.selectbox("Category", categories_for(kind), index=None, placeholder="Select a category")
        on = st.date_input("Date", value=date.today())
        notes = st.text_area("Notes (optional)", height=80)
        submitted = st.form_submit_button("Add Transaction", use_container_width=True)

    if not submitted:
        return

    try:
        form = validate_transaction(amount, kind, category or "", on, notes)
        get_repository().add_transaction(form)
    except ValidationError as exc:
        st.error(str(exc))
        return
    except BackendError as exc:
        st.error(f"Failed to add transaction: {exc}")
        return

    invalidate_snapshot()
    st.toast("Transaction added successfully!")
    st.rerun()


def _render_recent(df: pd.DataFrame, currency: str) -> None:
    if df.empty:
        st.info("No transactions yet. Add your first transaction above!")
        return

    recent = df.sort_values("date", ascending=False, kind="stable").head(RECENT_LIMIT)
    for row in recent.itertuples(index=False):
        info, amount, action = st.columns([4, 2, 1], vertical_alignment="center")
        with info:
            st.markdown(f"**{row.category}** · {format_date(row.date)}")
            if row.notes:
                st.caption(row.notes)
        css_class = "bm-amount--income" if row.type == "income" else "bm-amount--expense"
        amount.markdown(
            f"<span class='{css_class}'>{format_signed(row.amount, row.type, currency)}</span>",
            unsafe_allow_html=True,
        )
        if action.button("🗑️", key=f"delete-{row.id}", help="Delete transaction"):
            try:
                get_repository().delete_transaction(row.id)
            except BackendError as exc:
                st.error(f"Failed to delete transaction: {exc}")
                return
            invalidate_snapshot()
            st.toast("Transaction deleted")
            st.rerun()


def render_page(snapshot: FinanceSnapshot, df: pd.DataFrame) -> None:
    """Render the add-transaction page."""

    currency = snapshot.settings.currency
    page_header("Add Transaction", "Record income or an expense.")

    with card("New Transaction"):
        _render_form(currency)
    with card("Recent Transactions", suffix=f"Last {RECENT_LIMIT}"):
        _render_recent(df, currency)


__all__ = ["render_page"]
