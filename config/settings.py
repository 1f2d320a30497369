"""Centralised configuration handling for BudgetMate."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping

import streamlit as st
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_CURRENCY = "PKR"


def _streamlit_section(name: str) -> Mapping[str, Any] | None:
    """Return a mapping from Streamlit secrets for the given section."""

    try:
        if hasattr(st, "secrets") and name in st.secrets:
            section = st.secrets[name]
            if isinstance(section, Mapping):
                return section
            return dict(section)
    except Exception:  # pragma: no cover - accessing secrets may fail in tests
        return None
    return None


class Settings(BaseSettings):
    """Application settings sourced from env vars and Streamlit secrets."""

    supabase_url: str | None = Field(default=None, alias="SUPABASE_URL")
    supabase_anon_key: str | None = Field(default=None, alias="SUPABASE_ANON_KEY")

    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(default=None, alias="OPENAI_BASE_URL")
    openai_model: str = Field(default=DEFAULT_OPENAI_MODEL, alias="OPENAI_MODEL")

    default_currency: str = Field(default=DEFAULT_CURRENCY, alias="BUDGETMATE_CURRENCY")
    charity_percentage: float = Field(default=5.0, alias="BUDGETMATE_CHARITY_PERCENTAGE")
    chat_reset_hours: int = Field(default=24, alias="BUDGETMATE_CHAT_RESET_HOURS")
    request_timeout: float = Field(default=10.0, alias="BUDGETMATE_REQUEST_TIMEOUT")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    @property
    def backend_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    @property
    def openai_client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.openai_api_key:
            kwargs["api_key"] = self.openai_api_key
        if self.openai_base_url:
            kwargs["base_url"] = self.openai_base_url
        return kwargs


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    overrides: dict[str, Any] = {}

    supabase_section = _streamlit_section("supabase")
    if supabase_section:
        overrides["supabase_url"] = supabase_section.get("url") or supabase_section.get("SUPABASE_URL")
        overrides["supabase_anon_key"] = (
            supabase_section.get("anon_key") or supabase_section.get("SUPABASE_ANON_KEY")
        )

    openai_section = _streamlit_section("openai")
    if openai_section:
        overrides["openai_api_key"] = openai_section.get("api_key") or openai_section.get("OPENAI_API_KEY")
        overrides["openai_base_url"] = openai_section.get("api_base")
        overrides["openai_model"] = openai_section.get("model")

    return Settings(**{k: v for k, v in overrides.items() if v is not None})
