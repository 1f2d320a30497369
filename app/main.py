"""BudgetMate personal finance tracker."""

from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

from app.layout import NAV_LINKS, determine_active_page, inject_css, render_sidebar
from app.pages import (
    render_advisor_page,
    render_auth_page,
    render_budget_page,
    render_charity_page,
    render_comparison_page,
    render_dashboard_page,
    render_goals_page,
    render_reports_page,
    render_settings_page,
    render_transactions_page,
)
from app.state import clear_session, current_session, get_backend, load_snapshot, transactions_df
from backend import BackendConfigError, BackendError
from config import get_settings
from core.models import FinanceSnapshot

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _render_active_page(page: str, snapshot: FinanceSnapshot, df: pd.DataFrame) -> None:
    charity_percentage = st.session_state.get("charity_percentage") or get_settings().charity_percentage

    if page == "add":
        render_transactions_page(snapshot, df)
    elif page == "budget":
        render_budget_page(snapshot, df)
    elif page == "goals":
        render_goals_page(snapshot)
    elif page == "comparison":
        render_comparison_page(snapshot, df)
    elif page == "advisor":
        render_advisor_page(snapshot, df)
    elif page == "charity":
        render_charity_page(snapshot, df, charity_percentage)
    elif page == "reports":
        render_reports_page(snapshot, df)
    elif page == "settings":
        render_settings_page(snapshot)
    else:
        render_dashboard_page(snapshot, df, charity_percentage)


def _sign_out() -> None:
    try:
        get_backend().sign_out()
    except BackendError as exc:
        logger.warning("Sign-out request failed: %s", exc)
    clear_session()
    st.rerun()


def main() -> None:
    """Application entrypoint for BudgetMate."""

    _configure_logging()
    st.set_page_config(
        page_title="BudgetMate",
        page_icon="💰",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    try:
        get_backend()
    except BackendConfigError as exc:
        inject_css()
        st.error(f"{exc}. Set SUPABASE_URL and SUPABASE_ANON_KEY or add a [supabase] section to secrets.toml.")
        return

    session = current_session()
    if session is None:
        inject_css()
        render_auth_page()
        return

    try:
        with st.spinner("Loading your data…"):
            snapshot = load_snapshot()
    except BackendError as exc:
        inject_css()
        st.error(f"Failed to load your data: {exc}")
        if exc.status == 401:
            clear_session()
            st.button("Sign in again")
        return

    inject_css(snapshot.settings.dark_mode)
    active_page = determine_active_page(link.slug for link in NAV_LINKS if link.enabled)
    if render_sidebar(snapshot.username, session.user.email):
        _sign_out()
        return

    _render_active_page(active_page, snapshot, transactions_df())


if __name__ == "__main__":
    main()
