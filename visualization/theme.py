"""Shared Plotly theme tokens for BudgetMate visualizations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeTokens:
    label_color: str = "#475569"
    label_color_dark: str = "#E5E7EB"
    label_font: str = "Inter"
    label_size: int = 12
    grid_color: str = "#E5E7EB"
    grid_color_dark: str = "#374151"
    brand_blue: str = "#3B82F6"
    income_green: str = "#10B981"
    expense_red: str = "#EF4444"
    warning_amber: str = "#F59E0B"
    savings_purple: str = "#8B5CF6"
    neutral_grey: str = "#94A3B8"
    neutral_white: str = "#FFFFFF"
    category_palette: tuple[str, ...] = (
        "#3B82F6",
        "#10B981",
        "#F59E0B",
        "#EF4444",
        "#8B5CF6",
        "#06B6D4",
        "#84CC16",
        "#F97316",
    )

    def text_color(self, dark_mode: bool) -> str:
        return self.label_color_dark if dark_mode else self.label_color

    def gridline_color(self, dark_mode: bool) -> str:
        return self.grid_color_dark if dark_mode else self.grid_color


_TOKENS = ThemeTokens()


def theme_tokens() -> ThemeTokens:
    """Return the shared visualization tokens.

    The tokens are frozen to keep styling consistent between charts and other
    Plotly artefacts.
    """

    return _TOKENS
