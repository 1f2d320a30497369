"""SARA chat page."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from app.layout import page_header
from app.state import advisor_session
from core.ai import SUGGESTED_QUESTIONS, AdvisorSession, ask_advisor
from core.models import FinanceSnapshot

_AVATARS = {"user": "🧑", "assistant": "🤖"}


def _render_history(session: AdvisorSession) -> None:
    for message in session.messages:
        with st.chat_message(message.role, avatar=_AVATARS.get(message.role)):
            st.markdown(message.content)
            st.caption(message.timestamp.astimezone().strftime("%H:%M"))


def _ask(session: AdvisorSession, question: str, snapshot: FinanceSnapshot, df: pd.DataFrame) -> None:
    with st.spinner("SARA is thinking…"):
        ask_advisor(
            session,
            question,
            df=df,
            budgets=snapshot.budgets,
            goals=snapshot.goals,
            currency=snapshot.settings.currency,
        )
    st.rerun()


def render_page(snapshot: FinanceSnapshot, df: pd.DataFrame) -> None:
    """Render the AI advisor chat."""

    page_header("AI Financial Advisor", "Chat with SARA about your budgets, savings and spending.")

    session = advisor_session(snapshot.username)
    session.reset_if_expired()
    session.check_overspending(snapshot.budgets, df, snapshot.settings.currency)

    header_left, header_right = st.columns([4, 1], vertical_alignment="center")
    header_left.caption("🔒 Chat clears every 24 hours for privacy.")
    if header_right.button("Clear chat", use_container_width=True, key="advisor_clear"):
        session.reset()
        st.rerun()

    _render_history(session)

    if len(session.messages) <= 1:
        st.caption("Try asking:")
        cols = st.columns(len(SUGGESTED_QUESTIONS))
        for index, (col, suggestion) in enumerate(zip(cols, SUGGESTED_QUESTIONS)):
            if col.button(suggestion, key=f"advisor-suggestion-{index}", use_container_width=True):
                _ask(session, suggestion, snapshot, df)

    question = st.chat_input("Ask SARA about your finances…")
    if question:
        _ask(session, question, snapshot, df)


__all__ = ["render_page"]
