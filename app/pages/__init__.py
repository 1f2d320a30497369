"""Page modules for the BudgetMate Streamlit application."""

from .advisor import render_page as render_advisor_page
from .auth import render_page as render_auth_page
from .budgets import render_page as render_budget_page
from .charity import render_page as render_charity_page
from .comparison import render_page as render_comparison_page
from .dashboard import render_page as render_dashboard_page
from .goals import render_page as render_goals_page
from .reports import render_page as render_reports_page
from .settings import render_page as render_settings_page
from .transactions import render_page as render_transactions_page

__all__ = [
    "render_advisor_page",
    "render_auth_page",
    "render_budget_page",
    "render_charity_page",
    "render_comparison_page",
    "render_dashboard_page",
    "render_goals_page",
    "render_reports_page",
    "render_settings_page",
    "render_transactions_page",
]
