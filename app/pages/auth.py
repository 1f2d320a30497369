"""Sign-in and sign-up forms shown before a user is authenticated."""

from __future__ import annotations

import logging

import streamlit as st

from app.state import get_backend, store_session
from backend import BackendError
from core.validation import ValidationError, auth_error_message, validate_sign_in, validate_sign_up

logger = logging.getLogger(__name__)


def _render_sign_in() -> None:
    with st.form("sign_in_form"):
        email = st.text_input("Email", placeholder="you@example.com")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", use_container_width=True)

    if not submitted:
        return

    try:
        email = validate_sign_in(email, password)
        with st.spinner("Signing in…"):
            session = get_backend().sign_in(email, password)
    except ValidationError as exc:
        st.error(str(exc))
        return
    except BackendError as exc:
        logger.info("Sign-in rejected for %s: %s", email, exc)
        st.error(auth_error_message(exc))
        return

    store_session(session)
    st.rerun()


def _render_sign_up() -> None:
    with st.form("sign_up_form"):
        email = st.text_input("Email", placeholder="you@example.com", key="sign_up_email")
        password = st.text_input("Password", type="password", key="sign_up_password")
        confirm = st.text_input("Confirm password", type="password", key="sign_up_confirm")
        submitted = st.form_submit_button("Create account", use_container_width=True)

    if not submitted:
        return

    try:
        email = validate_sign_up(email, password, confirm)
        with st.spinner("Creating your account…"):
            session = get_backend().sign_up(email, password)
    except ValidationError as exc:
        st.error(str(exc))
        return
    except BackendError as exc:
        logger.info("Sign-up rejected for %s: %s", email, exc)
        st.error(auth_error_message(exc, signing_up=True))
        return

    if session is None:
        st.success("Account created successfully! You can now sign in.")
        return

    st.toast("Account created successfully!")
    store_session(session)
    st.rerun()


def render_page() -> None:
    """Render the authentication gate."""

    st.title("💰 BudgetMate")
    st.caption("Track income and expenses, plan budgets, save for goals and give Sadaqah.")

    _, centre, _ = st.columns([1, 2, 1])
    with centre:
        sign_in_tab, sign_up_tab = st.tabs(["Sign in", "Sign up"])
        with sign_in_tab:
            _render_sign_in()
        with sign_up_tab:
            _render_sign_up()


__all__ = ["render_page"]
