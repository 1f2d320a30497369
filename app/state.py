"""Session-state plumbing: backend handle, auth session and the cached data snapshot."""

from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

from analytics import transactions_frame
from backend import FinanceRepository, HostedBackend, build_backend
from config import get_settings
from core.ai import AdvisorSession
from core.models import AuthSession, FinanceSnapshot

logger = logging.getLogger(__name__)

BACKEND_KEY = "backend"
SESSION_KEY = "auth_session"
SNAPSHOT_KEY = "snapshot"
FRAME_KEY = "transactions_df"
ADVISOR_KEY = "advisor_session"

_USER_KEYS = (SESSION_KEY, SNAPSHOT_KEY, FRAME_KEY, ADVISOR_KEY, "charity_percentage")


def get_backend() -> HostedBackend:
    """Return this browser session's backend client, creating it on first use.

    Each Streamlit session keeps its own client so access tokens never leak
    between users.
    """

    if BACKEND_KEY not in st.session_state:
        st.session_state[BACKEND_KEY] = build_backend()
    return st.session_state[BACKEND_KEY]


def current_session() -> AuthSession | None:
    return st.session_state.get(SESSION_KEY)


def store_session(session: AuthSession) -> None:
    get_backend().use_session(session)
    st.session_state[SESSION_KEY] = session
    invalidate_snapshot()
    logger.info("Signed in user %s", session.user.id)


def clear_session() -> None:
    """Forget the signed-in user and everything cached for them."""

    for key in _USER_KEYS:
        st.session_state.pop(key, None)


def get_repository() -> FinanceRepository:
    session = current_session()
    if session is None:
        raise RuntimeError("No signed-in user")
    return FinanceRepository(get_backend(), session.user, default_currency=get_settings().default_currency)


def load_snapshot() -> FinanceSnapshot:
    """Return the cached snapshot, loading it from the backend when stale."""

    if SNAPSHOT_KEY not in st.session_state:
        snapshot = get_repository().load_snapshot()
        st.session_state[SNAPSHOT_KEY] = snapshot
        st.session_state[FRAME_KEY] = transactions_frame(snapshot.transactions)
    return st.session_state[SNAPSHOT_KEY]


def transactions_df() -> pd.DataFrame:
    load_snapshot()
    return st.session_state[FRAME_KEY]


def invalidate_snapshot() -> None:
    st.session_state.pop(SNAPSHOT_KEY, None)
    st.session_state.pop(FRAME_KEY, None)


def advisor_session(username: str) -> AdvisorSession:
    advisor = st.session_state.get(ADVISOR_KEY)
    if advisor is None:
        advisor = AdvisorSession(username=username, reset_hours=get_settings().chat_reset_hours)
        st.session_state[ADVISOR_KEY] = advisor
    advisor.username = username
    return advisor


__all__ = [
    "advisor_session",
    "clear_session",
    "current_session",
    "get_backend",
    "get_repository",
    "invalidate_snapshot",
    "load_snapshot",
    "store_session",
    "transactions_df",
]
