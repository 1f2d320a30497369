"""Charity (Sadaqah) page: suggested monthly giving and donation recording."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from analytics import charity_summary
from app.layout import card, page_header
from app.state import get_repository, invalidate_snapshot
from backend import BackendError
from core.formatting import format_currency, month_label
from core.models import CHARITY_PERCENTAGES, QUICK_DONATIONS, FinanceSnapshot
from core.validation import ValidationError, validate_positive_amount

PERCENTAGE_KEY = "charity_percentage"

QUOTES: tuple[tuple[str, str, str], ...] = (
    (
        "The example of those who spend their wealth in the way of Allah is like that of a seed of grain "
        "which grows seven ears, each of which contains a hundred grains.",
        "Surah Al-Baqarah (2:261)",
        "Quran",
    ),
    (
        "Charity does not decrease wealth, no one forgives another except that Allah increases his honor, "
        "and no one humbles himself for the sake of Allah except that Allah raises his status.",
        "Sahih Muslim",
        "Hadith",
    ),
    (
        "Give charity without delay, for it stands in the way of calamity.",
        "Al-Tirmidhi",
        "Hadith",
    ),
)


def _donate(amount: float, currency: str) -> None:
    try:
        get_repository().add_donation(amount)
    except BackendError:
        st.error("Failed to record donation. Please try again.")
        return

    invalidate_snapshot()
    st.toast(
        f"Alhamdulillah! {format_currency(amount, currency)} donation recorded. May Allah accept your charity."
    )
    st.rerun()


def render_page(snapshot: FinanceSnapshot, df: pd.DataFrame, default_percentage: float) -> None:
    """Render the charity page."""

    currency = snapshot.settings.currency
    page_header(
        "Charity & Donations (Sadaqah)",
        "Transform your income into blessings. Share your wealth, and watch it multiply with Allah's mercy.",
    )

    if st.session_state.get(PERCENTAGE_KEY) is None:
        st.session_state[PERCENTAGE_KEY] = default_percentage
    options = sorted(set(CHARITY_PERCENTAGES) | {float(st.session_state[PERCENTAGE_KEY])})

    with card("Monthly Charity Calculation", month_label(pd.Timestamp.today())):
        percentage = st.segmented_control(
            "Charity Percentage",
            options,
            format_func=lambda value: f"{value:g}%",
            key=PERCENTAGE_KEY,
        )
        # Deselecting the control yields None.
        summary = charity_summary(df, snapshot.donations, percentage or default_percentage)

        st.caption(f"Based on your monthly income of {format_currency(summary['monthly_income'], currency)}")
        st.markdown("**Monthly Charity Completed! 🎉**" if summary["completed"] else "Remaining Monthly Charity")
        st.subheader(format_currency(summary["remaining"], currency))
        st.caption(
            f"{summary['percentage']:g}% of monthly income · "
            f"{format_currency(summary['donated'], currency)} donated this month"
        )

        quick_cols = st.columns(len(QUICK_DONATIONS))
        for col, amount in zip(quick_cols, QUICK_DONATIONS):
            if col.button(format_currency(amount, currency), key=f"donate-{amount}", use_container_width=True):
                _donate(float(amount), currency)

        with st.form("custom_donation", clear_on_submit=True):
            amount_col, button_col = st.columns([3, 1], vertical_alignment="bottom")
            custom = amount_col.text_input("Custom amount", placeholder="Enter custom amount")
            submitted = button_col.form_submit_button("Donate", use_container_width=True)
        if submitted:
            try:
                amount = validate_positive_amount(custom)
            except ValidationError as exc:
                st.error(str(exc))
            else:
                _donate(amount, currency)

    cols = st.columns(len(QUOTES), gap="medium")
    for col, (text, source, kind) in zip(cols, QUOTES):
        with col:
            with card(kind):
                st.markdown(
                    f"<div class='bm-quote'>\"{text}\"<span class='bm-quote__source'>{source}</span></div>",
                    unsafe_allow_html=True,
                )


__all__ = ["QUOTES", "render_page"]
