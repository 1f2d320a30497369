"""Prompt templates and loaders for BudgetMate."""

from .base import PromptTemplate, load_prompt, render_prompt

__all__ = ["PromptTemplate", "load_prompt", "render_prompt"]
