"""SARA, the chat-based financial advisor."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Mapping

import pandas as pd
from openai import APIError, OpenAI

from analytics.budgets import detect_overspending
from analytics.summary import expense_by_category, split_totals
from config import get_settings
from core.formatting import format_currency
from core.models import SavingsGoal
from prompts import render_prompt

__all__ = [
    "AdvisorError",
    "AdvisorSession",
    "ChatMessage",
    "FinancialContext",
    "MAX_OUTPUT_TOKENS",
    "SUGGESTED_QUESTIONS",
    "ask_advisor",
    "build_advisor_prompt",
    "build_financial_context",
    "fallback_reply",
    "special_reply",
]

logger = logging.getLogger(__name__)

PROMPT_ADVISOR = "advisor"
MAX_OUTPUT_TOKENS = 150
TEMPERATURE = 0.8
TOP_P = 0.9

SUGGESTED_QUESTIONS: tuple[str, ...] = (
    "How can I save more this month?",
    "Analyze my spending",
    "Budget tips for next month",
    "Reach savings goals faster",
)


class AdvisorError(RuntimeError):
    """Raised when the AI advisor cannot produce an answer."""


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str
    timestamp: datetime
    source: str = "local"


@dataclass(frozen=True)
class FinancialContext:
    total_income: float
    total_expenses: float
    savings: float
    category_expenses: dict[str, float]
    budgets: dict[str, float]
    goals: list[dict[str, Any]]
    transaction_count: int


def _now() -> datetime:
    return datetime.now(timezone.utc)


def greeting(name: str) -> str:
    return (
        f"🤖 Assalamu Alaikum {name}! I'm SARA, your AI financial advisor. "
        "Ask about your finances, budgets, or savings! 🔒 Chat clears every 24 hours for privacy."
    )


@dataclass
class AdvisorSession:
    """Chat history that wipes itself once the reset interval has passed."""

    username: str = "friend"
    reset_hours: int = 24
    messages: list[ChatMessage] = field(default_factory=list)
    tracked_categories: set[str] = field(default_factory=set)
    last_cleared: datetime | None = None

    def reset(self, now: datetime | None = None) -> None:
        now = now or _now()
        self.messages = [ChatMessage("assistant", greeting(self.username), now)]
        self.tracked_categories = set()
        self.last_cleared = now

    def reset_if_expired(self, now: datetime | None = None) -> bool:
        now = now or _now()
        if self.last_cleared is None or now - self.last_cleared > timedelta(hours=self.reset_hours):
            self.reset(now)
            return True
        return False

    def append(self, message: ChatMessage) -> None:
        self.messages.append(message)

    def check_overspending(
        self,
        budgets: Mapping[str, float],
        df: pd.DataFrame,
        currency: str = "PKR",
        now: datetime | None = None,
    ) -> list[ChatMessage]:
        """Post one warning per newly overspent category since the last reset."""

        now = now or _now()
        warnings: list[ChatMessage] = []
        existing = {message.content for message in self.messages}
        for row in detect_overspending(budgets, df):
            category = row["category"]
            if category in self.tracked_categories:
                continue
            content = (
                f"⚠️ {self.username}, you've overspent in {category} by "
                f"{format_currency(row['overspent'], currency)} "
                f"(Budget: {format_currency(row['limit'], currency)}).\n"
                "• Pause non-essential spending.\n"
                "• Check transactions in the app.\n"
                "• Consider a small Sadaqah.\n"
                "Insha'Allah, you'll manage this! 🌟"
            )
            self.tracked_categories.add(category)
            if content in existing:
                continue
            message = ChatMessage("assistant", content, now, source="alert")
            self.messages.append(message)
            existing.add(content)
            warnings.append(message)
        return warnings


def special_reply(text: str, name: str) -> str | None:
    normalized = text.strip().lower()
    if normalized == "bye":
        return f"Assalamu Alaikum {name}! Goodbye, may Allah bless you! 🌟"
    if normalized in {"hello", "hi"}:
        return f"Assalamu Alaikum {name}! How can I assist with your finances today? 😊"
    return None


def build_financial_context(
    df: pd.DataFrame,
    budgets: Mapping[str, float],
    goals: Iterable[SavingsGoal],
) -> FinancialContext:
    income, expenses = split_totals(df)
    return FinancialContext(
        total_income=income,
        total_expenses=expenses,
        savings=income - expenses,
        category_expenses={str(k): float(v) for k, v in expense_by_category(df).items()},
        budgets={str(k): float(v) for k, v in budgets.items()},
        goals=[
            {
                "title": goal.title,
                "target_amount": goal.target_amount,
                "current_amount": goal.current_amount,
                "target_date": goal.target_date.isoformat(),
            }
            for goal in goals
        ],
        transaction_count=int(len(df)),
    )


def build_advisor_prompt(context: FinancialContext, question: str, name: str, currency: str = "PKR") -> str:
    return render_prompt(
        PROMPT_ADVISOR,
        name=name,
        currency=currency,
        income=f"{context.total_income:,.0f}",
        expenses=f"{context.total_expenses:,.0f}",
        savings=f"{context.savings:,.0f}",
        category_expenses=json.dumps(context.category_expenses, ensure_ascii=False),
        budgets=json.dumps(context.budgets, ensure_ascii=False),
        goals=json.dumps(context.goals, ensure_ascii=False),
        transaction_count=context.transaction_count,
        question=question,
    )


def fallback_reply(question: str, context: FinancialContext, name: str, currency: str = "PKR") -> str:
    """Canned tip used when the AI service is unavailable."""

    text = f"🤖 Hi {name}! I'm offline but here's a quick tip:\n"
    lowered = question.lower()
    if "budget" in lowered:
        text += "Check your spending in the app.\n• Adjust high-expense categories.\nStay on track! 🌟"
    elif "save" in lowered:
        monthly_target = round(context.total_income * 0.1)
        text += (
            f"Save {format_currency(monthly_target, currency)} monthly.\n"
            "• Use Islamic savings accounts.\nKeep it up! 🌟"
        )
    else:
        text += "Track your finances in the app.\n• Review expenses weekly.\nYou're doing great! 🌟"
    return text


def _resolve_openai_client() -> OpenAI:
    settings = get_settings()
    kwargs = settings.openai_client_kwargs
    if "api_key" not in kwargs:
        raise AdvisorError("Missing OpenAI API key. Add it to .streamlit/secrets.toml under [openai].")
    return OpenAI(**kwargs)


def _complete(client: OpenAI, prompt: str, model: str) -> str:
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=MAX_OUTPUT_TOKENS,
            temperature=TEMPERATURE,
            top_p=TOP_P,
        )
    except APIError as exc:
        raise AdvisorError(f"OpenAI API error: {exc}") from exc

    try:
        text = response.choices[0].message.content or ""
    except (AttributeError, IndexError) as exc:  # pragma: no cover - unexpected SDK output
        raise AdvisorError("Unexpected response format from OpenAI API") from exc

    text = text.strip()
    if not text:
        raise AdvisorError("OpenAI response was empty")
    return text


def ask_advisor(
    session: AdvisorSession,
    question: str,
    *,
    df: pd.DataFrame,
    budgets: Mapping[str, float],
    goals: Iterable[SavingsGoal],
    currency: str = "PKR",
    client_factory: Callable[[], OpenAI] | None = None,
    now: datetime | None = None,
) -> ChatMessage | None:
    """Record ``question`` and append SARA's answer to the session.

    Greetings and farewells are answered locally. Everything else goes to the
    chat completions API; when that fails the reply is an offline tip built
    from the user's own numbers. Returns ``None`` for blank questions.
    """

    if not question.strip():
        return None

    now = now or _now()
    session.append(ChatMessage("user", question, now, source="user"))

    special = special_reply(question, session.username)
    if special is not None:
        reply = ChatMessage("assistant", special, now, source="local")
        session.append(reply)
        return reply

    context = build_financial_context(df, budgets, goals)
    try:
        client = (client_factory or _resolve_openai_client)()
        prompt = build_advisor_prompt(context, question, session.username, currency)
        text = _complete(client, prompt, get_settings().openai_model)
        reply = ChatMessage("assistant", text, now, source="ai")
    except AdvisorError as exc:
        logger.warning("Advisor falling back to offline tips: %s", exc)
        reply = ChatMessage(
            "assistant",
            fallback_reply(question, context, session.username, currency),
            now,
            source="fallback",
        )

    session.append(reply)
    return reply
