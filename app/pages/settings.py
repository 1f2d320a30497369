"""Settings: appearance, username, one-time currency change and data management."""

from __future__ import annotations

import logging
from datetime import date, datetime

import streamlit as st

from app.layout import card, page_header
from app.state import get_repository, invalidate_snapshot
from backend import BackendError
from backend.repository import USERNAME_COOLDOWN_DAYS
from core.formatting import format_date
from core.models import CURRENCIES, FinanceSnapshot
from core.reports import export_filename, export_snapshot, parse_snapshot
from core.validation import ValidationError, validate_username

logger = logging.getLogger(__name__)

CONFIRM_CLEAR_KEY = "confirm_clear_data"


def _render_appearance(snapshot: FinanceSnapshot) -> None:
    with card("Appearance"):
        dark_mode = st.toggle("Dark mode", value=snapshot.settings.dark_mode, key="settings_dark_mode")
        if dark_mode == snapshot.settings.dark_mode:
            return
        try:
            get_repository().update_settings(dark_mode=dark_mode)
        except BackendError as exc:
            st.error(f"Failed to update settings: {exc}")
            return
        invalidate_snapshot()
        st.rerun()


def _render_username(snapshot: FinanceSnapshot) -> None:
    profile = snapshot.profile
    with card("Username", suffix=f"Changeable every {USERNAME_COOLDOWN_DAYS} days"):
        with st.form("username_form"):
            raw = st.text_input("Username", value=snapshot.username if profile else "")
            submitted = st.form_submit_button("Update Username")
        if profile and profile.username_last_updated:
            st.caption(f"Last changed on {format_date(profile.username_last_updated)}")
        if not submitted or profile is None:
            return
        try:
            username = validate_username(raw)
            get_repository().update_username(profile, username)
        except ValidationError as exc:
            st.error(str(exc))
            return
        except BackendError:
            st.error("Failed to update username")
            return
        invalidate_snapshot()
        st.toast(
            "Your username has been updated. The next time you can update your username "
            f"will be after {USERNAME_COOLDOWN_DAYS} days."
        )
        st.rerun()


def _render_currency(snapshot: FinanceSnapshot) -> None:
    profile = snapshot.profile
    current = snapshot.settings.currency
    codes = [code for code, _ in CURRENCIES]
    names = dict(CURRENCIES)

    with card("Currency", suffix=current):
        if profile is None or profile.currency_changed:
            changed_on = (
                f" on {format_date(profile.currency_change_date)}"
                if profile and profile.currency_change_date
                else ""
            )
            st.info(f"Currency was changed{changed_on} and cannot be modified again.")
            return

        st.warning("You can change your currency only once. This change is permanent.")
        with st.form("currency_form"):
            selected = st.selectbox(
                "Currency",
                codes,
                index=codes.index(current) if current in codes else 0,
                format_func=lambda code: f"{code} · {names[code]}",
            )
            password = st.text_input("Confirm with your password", type="password")
            submitted = st.form_submit_button("Change Currency")
        if not submitted:
            return
        if selected == current:
            st.info(f"{current} is already your currency.")
            return
        try:
            get_repository().update_currency(profile, selected, password)
        except ValidationError as exc:
            st.error(str(exc))
            return
        except BackendError:
            st.error("Failed to update currency")
            return
        invalidate_snapshot()
        st.toast(f"Currency changed to {selected}. This change is permanent.")
        st.rerun()


def _render_data_management(snapshot: FinanceSnapshot) -> None:
    with card("Data Management"):
        st.download_button(
            "⬇️ Export Data (JSON)",
            data=export_snapshot(snapshot, datetime.now()),
            file_name=export_filename(date.today()),
            mime="application/json",
            use_container_width=True,
            key="export_json",
        )

        upload = st.file_uploader("Import Data (JSON)", type=["json"], key="import_json")
        if upload is not None and st.button("Import", use_container_width=True, key="import_confirm"):
            try:
                get_repository().import_snapshot(parse_snapshot(upload.getvalue()))
            except ValidationError as exc:
                st.error(str(exc))
                return
            except BackendError as exc:
                logger.warning("Import failed: %s", exc)
                st.error("Failed to import data. Please try again.")
                return
            invalidate_snapshot()
            st.toast("Data imported successfully!")
            st.rerun()

        st.markdown("---")
        if not st.session_state.get(CONFIRM_CLEAR_KEY):
            if st.button("🗑️ Clear All Data", use_container_width=True, key="clear_data"):
                st.session_state[CONFIRM_CLEAR_KEY] = True
                st.rerun()
            return

        st.error("Are you sure you want to clear all data? This action cannot be undone.")
        confirm_col, cancel_col = st.columns(2)
        if cancel_col.button("Cancel", use_container_width=True, key="clear_cancel"):
            st.session_state.pop(CONFIRM_CLEAR_KEY, None)
            st.rerun()
        if confirm_col.button("Yes, clear everything", type="primary", use_container_width=True, key="clear_yes"):
            st.session_state.pop(CONFIRM_CLEAR_KEY, None)
            try:
                get_repository().clear_all_data()
            except BackendError as exc:
                st.error(f"Failed to clear data: {exc}")
                return
            invalidate_snapshot()
            st.toast("All data cleared successfully!")
            st.rerun()


def render_page(snapshot: FinanceSnapshot) -> None:
    """Render the settings page."""

    page_header("Settings", "Manage your account and preferences.")
    _render_appearance(snapshot)
    _render_username(snapshot)
    _render_currency(snapshot)
    _render_data_management(snapshot)


__all__ = ["render_page"]
