"""Shared layout primitives for the BudgetMate Streamlit app."""

from __future__ import annotations

import html
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable

import streamlit as st


@dataclass(frozen=True)
class NavigationLink:
    slug: str
    label: str
    icon: str
    enabled: bool = True


NAV_LINKS: tuple[NavigationLink, ...] = (
    NavigationLink("dashboard", "Dashboard", "🏠"),
    NavigationLink("add", "Add Transaction", "➕"),
    NavigationLink("budget", "Budget", "💼"),
    NavigationLink("goals", "Goals", "🎯"),
    NavigationLink("comparison", "Comparison", "📊"),
    NavigationLink("advisor", "AI Advisor", "🤖"),
    NavigationLink("charity", "Charity", "💚"),
    NavigationLink("reports", "Reports", "📄"),
    NavigationLink("settings", "Settings", "⚙️"),
)

DEFAULT_PAGE = "dashboard"

_LIGHT_TOKENS = {
    "page_bg": "#F4F6FB",
    "card_bg": "#FFFFFF",
    "border": "#E6EAF2",
    "text": "#111827",
    "muted": "#4B5563",
}

_DARK_TOKENS = {
    "page_bg": "#0F172A",
    "card_bg": "#1F2937",
    "border": "#374151",
    "text": "#F9FAFB",
    "muted": "#9CA3AF",
}


def inject_css(dark_mode: bool = False) -> None:
    """Inject global CSS tokens and component styling into the Streamlit app."""

    tokens = _DARK_TOKENS if dark_mode else _LIGHT_TOKENS
    st.markdown(
        f"""
        <style>
          :root {{
            --gap: 16px;
            --radius: 12px;
            --page-bg: {tokens["page_bg"]};
            --card-bg: {tokens["card_bg"]};
            --border: {tokens["border"]};
            --text: {tokens["text"]};
            --muted: {tokens["muted"]};
            --shadow: 0 1px 2px rgba(16, 24, 40, 0.05), 0 1px 3px rgba(16, 24, 40, 0.06);
          }}

          body, [data-testid="stAppViewContainer"] {{
            background: var(--page-bg);
            color: var(--text);
          }}

          .block-container {{
            max-width: 1200px;
            padding-top: 2.5rem;
            padding-bottom: 4rem;
          }}

          .bm-brand {{
            font-size: 1.5rem;
            font-weight: 700;
            color: #2563EB;
            margin-bottom: 0.25rem;
          }}

          .bm-user {{
            color: var(--muted);
            font-size: 0.9rem;
            margin-bottom: 0.75rem;
          }}

          .bm-card-anchor {{
            display: none;
          }}

          [data-testid="stVerticalBlock"]:has(> .bm-card-anchor) {{
            background: var(--card-bg);
            border: 1px solid var(--border);
            border-radius: var(--radius);
            box-shadow: var(--shadow);
            padding: 16px;
            margin-bottom: var(--gap);
            display: flex;
            flex-direction: column;
            gap: 12px;
          }}

          .bm-card__head {{
            display: flex;
            align-items: center;
            justify-content: space-between;
            gap: 12px;
            font-weight: 600;
            color: var(--text);
            margin-bottom: 4px;
            flex-wrap: wrap;
          }}

          .bm-card__title {{
            font-size: 1.05rem;
          }}

          .bm-chip {{
            font-size: 12px;
            padding: 2px 8px;
            border-radius: 999px;
            border: 1px solid #D6DEFF;
            background: #F0F4FF;
            color: #3346FF;
            white-space: nowrap;
          }}

          .bm-amount--income {{
            color: #10B981;
            font-weight: 600;
          }}

          .bm-amount--expense {{
            color: #EF4444;
            font-weight: 600;
          }}

          .bm-row {{
            display: flex;
            align-items: center;
            justify-content: space-between;
            font-weight: 600;
            color: var(--text);
            margin-top: 12px;
            margin-bottom: 4px;
          }}

          .bm-quote {{
            border-left: 4px solid #10B981;
            padding: 0.5rem 1rem;
            color: var(--muted);
            font-style: italic;
          }}

          .bm-quote__source {{
            display: block;
            margin-top: 0.4rem;
            font-style: normal;
            font-size: 0.85rem;
          }}

          @media (min-width: 1200px) {{
            [data-testid="stVerticalBlock"]:has(> .bm-card-anchor) {{
              padding: 24px;
            }}
            :root {{
              --gap: 24px;
            }}
          }}
        </style>
        """,
        unsafe_allow_html=True,
    )


def card_head_html(title: str, suffix: str | None = None) -> str:
    chip_html = f'<span class="bm-chip">{html.escape(suffix)}</span>' if suffix else ""
    return (
        f'<div class="bm-card__head"><span class="bm-card__title">{html.escape(title)}</span>'
        f"{chip_html}</div>"
    )


@contextmanager
def card(title: str, suffix: str | None = None):
    """Render content inside a reusable BudgetMate card."""

    container = st.container()
    with container:
        st.markdown('<div class="bm-card-anchor"></div>', unsafe_allow_html=True)
        st.markdown(card_head_html(title, suffix), unsafe_allow_html=True)
        yield


def determine_active_page(valid_pages: Iterable[str]) -> str:
    """Determine the active page from session state or the query params."""

    valid = set(valid_pages)
    raw_page = (
        st.session_state.pop("nav_request", None)
        or st.session_state.get("active_page")
        or st.query_params.get("page", DEFAULT_PAGE)
    )
    if isinstance(raw_page, list):
        raw_page = raw_page[0] if raw_page else DEFAULT_PAGE

    page = raw_page if raw_page in valid else DEFAULT_PAGE
    if st.session_state.get("active_page") != page:
        st.session_state["active_page"] = page
    _sync_page_query_param()
    return page


def navigate_to(page: str) -> None:
    """Switch to ``page`` on the next rerun."""

    # The sidebar radio owns "active_page"; it can't be written after it renders.
    st.session_state["nav_request"] = page
    st.rerun()


def _sync_page_query_param() -> None:
    page = st.session_state.get("active_page", DEFAULT_PAGE)
    if st.query_params.get("page") != page:
        st.query_params["page"] = page


def user_badge_html(username: str, email: str) -> str:
    return f"<div class='bm-user'>👋 {html.escape(username)} · {html.escape(email)}</div>"


def render_sidebar(username: str, email: str) -> bool:
    """Render brand, navigation and the sign-out button.

    Returns ``True`` when the user asked to sign out.
    """

    links = [link for link in NAV_LINKS if link.enabled]
    slugs = [link.slug for link in links]
    labels = {link.slug: f"{link.icon} {link.label}" for link in links}

    with st.sidebar:
        st.markdown("<div class='bm-brand'>BudgetMate</div>", unsafe_allow_html=True)
        st.markdown(user_badge_html(username, email), unsafe_allow_html=True)
        st.radio(
            "Navigate",
            slugs,
            key="active_page",
            format_func=lambda slug: labels[slug],
            label_visibility="collapsed",
            on_change=_sync_page_query_param,
        )
        st.markdown("---")
        return st.button("🚪 Sign out", use_container_width=True, key="sign_out")


def page_header(title: str, caption: str | None = None) -> None:
    st.title(title)
    if caption:
        st.caption(caption)


__all__ = [
    "DEFAULT_PAGE",
    "NAV_LINKS",
    "NavigationLink",
    "card",
    "card_head_html",
    "determine_active_page",
    "inject_css",
    "navigate_to",
    "page_header",
    "render_sidebar",
    "user_badge_html",
]
