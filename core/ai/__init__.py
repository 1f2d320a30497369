"""AI-focused helpers for BudgetMate."""

from .advisor import (
    SUGGESTED_QUESTIONS,
    AdvisorError,
    AdvisorSession,
    ChatMessage,
    ask_advisor,
    build_advisor_prompt,
    build_financial_context,
)

__all__ = [
    "AdvisorError",
    "AdvisorSession",
    "ChatMessage",
    "SUGGESTED_QUESTIONS",
    "ask_advisor",
    "build_advisor_prompt",
    "build_financial_context",
]
