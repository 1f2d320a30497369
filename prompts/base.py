"""Prompt templates for the BudgetMate advisor."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from string import Formatter
from typing import Any

__all__ = ["PromptTemplate", "load_prompt", "render_prompt"]

PROMPTS_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class PromptTemplate:
    """A ``str.format`` template read from ``prompts/<name>.txt``."""

    name: str
    content: str

    @property
    def fields(self) -> frozenset[str]:
        return frozenset(field for _, field, _, _ in Formatter().parse(self.content) if field)

    def render(self, /, **values: Any) -> str:
        missing = self.fields - values.keys()
        if missing:
            raise ValueError(f"Prompt '{self.name}' is missing values for: {', '.join(sorted(missing))}")
        return self.content.format(**values)


@lru_cache(maxsize=8)
def load_prompt(name: str) -> PromptTemplate:
    path = PROMPTS_DIR / f"{name}.txt"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path}")
    return PromptTemplate(name=name, content=path.read_text(encoding="utf-8").strip())


def render_prompt(prompt_name: str, /, **values: Any) -> str:
    return load_prompt(prompt_name).render(**values)
