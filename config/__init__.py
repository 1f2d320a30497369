"""Application configuration utilities."""

from .settings import DEFAULT_CURRENCY, DEFAULT_OPENAI_MODEL, Settings, get_settings

__all__ = [
    "DEFAULT_CURRENCY",
    "DEFAULT_OPENAI_MODEL",
    "Settings",
    "get_settings",
]
