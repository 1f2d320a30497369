"""Streamlit front end for BudgetMate."""

from app.main import main

__all__ = ["main"]
