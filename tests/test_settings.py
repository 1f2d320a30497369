from __future__ import annotations

import os

import streamlit as st

from config import Settings, get_settings


def test_defaults_without_secrets():
    settings = get_settings()

    assert settings.backend_configured is False
    assert settings.openai_client_kwargs == {}
    assert settings.default_currency == "PKR"
    assert settings.charity_percentage == 5.0
    assert settings.chat_reset_hours == 24


def test_streamlit_secrets_sections_are_merged(monkeypatch):
    monkeypatch.setattr(
        st,
        "secrets",
        {
            "supabase": {"url": "https://demo.example.co", "anon_key": "anon"},
            "openai": {"api_key": "sk-test", "model": "gpt-4o"},
        },
        raising=False,
    )
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.backend_configured is True
    assert settings.openai_model == "gpt-4o"
    assert settings.openai_client_kwargs == {"api_key": "sk-test"}


def test_environment_variables_are_read(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://env.example.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "env-anon")
    get_settings.cache_clear()

    assert get_settings().supabase_url == "https://env.example.co"


def test_every_settings_variable_is_cleared_for_tests():
    aliases = {field.alias for field in Settings.model_fields.values() if field.alias}

    assert {"BUDGETMATE_CURRENCY", "BUDGETMATE_CHAT_RESET_HOURS"} <= aliases
    assert not aliases & set(os.environ)


def test_app_defaults_can_come_from_the_environment(monkeypatch):
    monkeypatch.setenv("BUDGETMATE_CURRENCY", "AED")
    monkeypatch.setenv("BUDGETMATE_CHAT_RESET_HOURS", "12")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.default_currency == "AED"
    assert settings.chat_reset_hours == 12
