from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import cast

import httpx
import pytest
from openai import APIError, OpenAI

from core.ai import AdvisorSession, ask_advisor, build_advisor_prompt, build_financial_context
from core.ai.advisor import fallback_reply, special_reply
from prompts import PromptTemplate, load_prompt, render_prompt

NOW = datetime(2024, 3, 12, 9, 0, tzinfo=timezone.utc)


class DummyClient:
    def __init__(self, reply: str = "Spend less on Food.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict[str, object]] = []

    class Chat:
        def __init__(self, outer):
            self.outer = outer

        class Completions:
            def __init__(self, outer):
                self.outer = outer

            def create(self, **kwargs: object):
                self.outer.outer.calls.append(kwargs)
                if self.outer.outer.error is not None:
                    raise self.outer.outer.error
                return SimpleNamespace(
                    choices=[SimpleNamespace(message=SimpleNamespace(content=self.outer.outer.reply))]
                )

        @property
        def completions(self):
            return DummyClient.Chat.Completions(self)

    @property
    def chat(self):
        return DummyClient.Chat(self)


def _session() -> AdvisorSession:
    session = AdvisorSession(username="Amina")
    session.reset_if_expired(NOW)
    return session


def test_new_session_starts_with_greeting():
    session = _session()

    assert len(session.messages) == 1
    assert "Assalamu Alaikum Amina" in session.messages[0].content
    assert session.last_cleared == NOW


def test_chat_resets_after_interval():
    session = _session()
    session.messages.append(session.messages[0])

    assert session.reset_if_expired(NOW + timedelta(hours=23)) is False
    assert len(session.messages) == 2
    assert session.reset_if_expired(NOW + timedelta(hours=25)) is True
    assert len(session.messages) == 1


def test_overspend_warning_is_posted_once_per_category(sample_frame):
    session = _session()

    first = session.check_overspending({"Food": 400, "Rent": 5000}, sample_frame, "PKR", NOW)
    second = session.check_overspending({"Food": 400, "Rent": 5000}, sample_frame, "PKR", NOW)

    assert len(first) == 1
    assert "overspent in Food by PKR 50.00" in first[0].content
    assert first[0].source == "alert"
    assert second == []

    session.reset(NOW)
    assert len(session.check_overspending({"Food": 400}, sample_frame, "PKR", NOW)) == 1


def test_identical_warning_is_not_posted_twice(sample_frame):
    session = _session()
    session.check_overspending({"Food": 400}, sample_frame, "PKR", NOW)
    session.tracked_categories.clear()

    assert session.check_overspending({"Food": 400}, sample_frame, "PKR", NOW) == []
    assert [message.source for message in session.messages] == ["local", "alert"]
    assert "Food" in session.tracked_categories


def test_greetings_are_answered_locally():
    assert special_reply(" Hi ", "Amina").startswith("Assalamu Alaikum Amina")
    assert "Goodbye" in special_reply("bye", "Amina")
    assert special_reply("How do I save?", "Amina") is None


def test_ask_advisor_uses_injected_client(sample_frame):
    session = _session()
    client = DummyClient()

    reply = ask_advisor(
        session,
        "How can I save more this month?",
        df=sample_frame,
        budgets={"Food": 400},
        goals=[],
        client_factory=lambda: cast(OpenAI, client),
        now=NOW,
    )

    assert reply is not None
    assert reply.source == "ai"
    assert reply.content == "Spend less on Food."
    assert len(client.calls) == 1
    prompt = client.calls[0]["messages"][0]["content"]  # type: ignore[index]
    assert "How can I save more this month?" in prompt
    assert client.calls[0]["max_tokens"] == 150
    assert [message.role for message in session.messages] == ["assistant", "user", "assistant"]


def test_ask_advisor_falls_back_without_api_key(sample_frame):
    session = _session()

    reply = ask_advisor(session, "How do I save?", df=sample_frame, budgets={}, goals=[], now=NOW)

    assert reply is not None
    assert reply.source == "fallback"
    assert "PKR 1,200.00" in reply.content


def test_blank_question_is_ignored(sample_frame):
    session = _session()

    assert ask_advisor(session, "   ", df=sample_frame, budgets={}, goals=[], now=NOW) is None
    assert len(session.messages) == 1


def test_prompt_carries_financial_context(sample_frame):
    context = build_financial_context(sample_frame, {"Food": 400}, [])
    prompt = build_advisor_prompt(context, "Analyze my spending", "Amina", "AED")

    assert context.transaction_count == 10
    assert "12,000" in prompt
    assert "AED" in prompt
    assert '"Food": 400.0' in prompt


def test_fallback_mentions_budget_tips(sample_frame):
    context = build_financial_context(sample_frame, {}, [])

    assert "Adjust high-expense categories" in fallback_reply("budget tips", context, "Amina")


def test_advisor_prompt_requires_every_placeholder():
    template = load_prompt("advisor")

    assert {"name", "currency", "question", "transaction_count"} <= template.fields
    with pytest.raises(ValueError, match="question"):
        template.render(name="Amina")


@pytest.mark.parametrize(
    "client",
    [
        DummyClient(
            error=APIError(
                "Service unavailable",
                httpx.Request("POST", "https://api.openai.com/v1/chat/completions"),
                body=None,
            )
        ),
        DummyClient(reply="   "),
    ],
    ids=["api-error", "empty-reply"],
)
def test_ask_advisor_falls_back_when_the_api_gives_no_answer(sample_frame, client):
    session = _session()

    reply = ask_advisor(
        session,
        "Budget tips for next month",
        df=sample_frame,
        budgets={},
        goals=[],
        client_factory=lambda: cast(OpenAI, client),
        now=NOW,
    )

    assert reply is not None
    assert reply.source == "fallback"
    assert "Adjust high-expense categories" in reply.content
    assert len(client.calls) == 1


def test_templates_may_use_name_as_a_field():
    rendered = render_prompt(
        "advisor",
        name="Amina",
        currency="PKR",
        income="0",
        expenses="0",
        savings="0",
        category_expenses="{}",
        budgets="{}",
        goals="[]",
        transaction_count=0,
        question="Hi?",
    )

    assert "User: Amina." in rendered
    assert PromptTemplate("inline", "{self} and {name}").render(self="me", name="you") == "me and you"
