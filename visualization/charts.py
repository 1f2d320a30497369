"""Plotly chart builders for the BudgetMate views."""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from core.models import BudgetRow, MonthRow, SavingsGoal

from .theme import theme_tokens

TOKENS = theme_tokens()

__all__ = [
    "build_budget_chart",
    "build_category_chart",
    "build_comparison_chart",
    "build_goal_chart",
    "build_monthly_expense_chart",
]

_BUDGET_STATUS_COLORS = {
    "ok": TOKENS.income_green,
    "warning": TOKENS.warning_amber,
    "over": TOKENS.expense_red,
    "unset": TOKENS.neutral_grey,
}


def _empty_plotly_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        annotations=[
            dict(
                text=message,
                x=0.5,
                y=0.5,
                xref="paper",
                yref="paper",
                showarrow=False,
                font=dict(color=TOKENS.neutral_grey, size=14, family=TOKENS.label_font),
            )
        ],
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        margin=dict(l=0, r=0, t=20, b=0),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def _apply_axes(fig: go.Figure, dark_mode: bool, y_title: str) -> go.Figure:
    fig.update_layout(
        margin=dict(l=0, r=0, t=20, b=0),
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1.0),
        xaxis=dict(showgrid=False, tickfont=dict(color=TOKENS.text_color(dark_mode), size=TOKENS.label_size)),
        yaxis=dict(
            title=y_title,
            showgrid=True,
            gridcolor=TOKENS.gridline_color(dark_mode),
            zeroline=False,
            tickfont=dict(color=TOKENS.text_color(dark_mode), size=TOKENS.label_size),
        ),
        font=dict(family=TOKENS.label_font, color=TOKENS.text_color(dark_mode)),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def build_category_chart(breakdown: pd.DataFrame, currency: str = "PKR", dark_mode: bool = False) -> go.Figure:
    """Render a donut chart of expenses by category."""

    if breakdown.empty:
        return _empty_plotly_figure("No expenses recorded yet.")

    palette = list(TOKENS.category_palette)
    data = breakdown.sort_values("Amount", ascending=False).reset_index(drop=True)
    repeats = (len(data) // len(palette)) + 1
    color_sequence = (palette * repeats)[: len(data)]

    fig = px.pie(
        data,
        names="Category",
        values="Amount",
        hole=0.55,
        color="Category",
        color_discrete_sequence=color_sequence,
    )
    fig.update_traces(
        textposition="inside",
        texttemplate="%{label}<br>%{percent:.0%}",
        hovertemplate=f"%{{label}}<br>{currency} %{{value:,.2f}}<extra></extra>",
        marker=dict(line=dict(color=TOKENS.neutral_white, width=2)),
    )
    fig.update_layout(
        margin=dict(l=0, r=0, t=0, b=0),
        legend=dict(
            title="",
            orientation="v",
            yanchor="middle",
            y=0.5,
            xanchor="left",
            x=1.05,
            font=dict(color=TOKENS.text_color(dark_mode), family=TOKENS.label_font, size=TOKENS.label_size),
        ),
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def build_monthly_expense_chart(monthly: pd.DataFrame, currency: str = "PKR", dark_mode: bool = False) -> go.Figure:
    """Render expenses per month as bars labelled ``MM/YY``."""

    if monthly.empty:
        return _empty_plotly_figure("No expenses recorded yet.")

    fig = go.Figure(
        go.Bar(
            x=monthly["Label"],
            y=monthly["Amount"],
            name="Expenses",
            marker=dict(color=TOKENS.brand_blue),
            hovertemplate=f"%{{x}}<br>{currency} %{{y:,.2f}}<extra></extra>",
        )
    )
    return _apply_axes(fig, dark_mode, "Expenses")


def build_comparison_chart(rows: list[MonthRow], currency: str = "PKR", dark_mode: bool = False) -> go.Figure:
    """Render monthly income and expenses as grouped bars with a savings line."""

    data = pd.DataFrame.from_records(rows)
    if data.empty or not data["transaction_count"].any():
        return _empty_plotly_figure("No transactions recorded for this year.")

    hover = f"%{{x}}<br>{currency} %{{y:,.2f}}<extra></extra>"
    fig = go.Figure()
    fig.add_trace(
        go.Bar(x=data["month"], y=data["income"], name="Income", marker_color=TOKENS.income_green, hovertemplate=hover)
    )
    fig.add_trace(
        go.Bar(
            x=data["month"], y=data["expenses"], name="Expenses", marker_color=TOKENS.expense_red, hovertemplate=hover
        )
    )
    fig.add_trace(
        go.Scatter(
            x=data["month"],
            y=data["savings"],
            name="Savings",
            mode="lines+markers",
            line=dict(color=TOKENS.savings_purple, width=3, shape="spline", smoothing=0.4),
            marker=dict(size=7, color=TOKENS.savings_purple, line=dict(color=TOKENS.neutral_white, width=1.5)),
            hovertemplate=hover,
        )
    )
    fig.update_layout(barmode="group", bargap=0.25)
    return _apply_axes(fig, dark_mode, currency)


def build_budget_chart(rows: list[BudgetRow], dark_mode: bool = False) -> go.Figure:
    """Render budget usage per category as horizontal bars coloured by status."""

    data = pd.DataFrame.from_records([row for row in rows if row["limit"] > 0])
    if data.empty:
        return _empty_plotly_figure("Set a monthly budget to track usage.")

    fig = go.Figure(
        go.Bar(
            x=data["percentage"],
            y=data["category"],
            orientation="h",
            marker=dict(color=[_BUDGET_STATUS_COLORS[status] for status in data["status"]]),
            text=[f"{value:.0f}%" for value in data["percentage"]],
            textposition="outside",
            cliponaxis=False,
            hovertemplate="%{y}<br>%{x:.1f}% used<extra></extra>",
        )
    )
    fig.update_layout(
        margin=dict(l=0, r=10, t=20, b=0),
        xaxis=dict(title="% of budget", range=[0, 110], showgrid=False, zeroline=False),
        yaxis=dict(automargin=True, tickfont=dict(color=TOKENS.text_color(dark_mode))),
        bargap=0.35,
        height=max(180, 40 * len(data)),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def build_goal_chart(goals: list[SavingsGoal], currency: str = "PKR", dark_mode: bool = False) -> go.Figure:
    """Saved versus remaining amount for each goal as stacked horizontal bars."""

    if not goals:
        return _empty_plotly_figure("No savings goals yet.")

    titles = [goal.title for goal in goals]
    saved = [min(goal.current_amount, goal.target_amount) for goal in goals]
    remaining = [max(goal.target_amount - goal.current_amount, 0.0) for goal in goals]
    saved_colors = [TOKENS.income_green if goal.is_completed else TOKENS.savings_purple for goal in goals]

    fig = go.Figure()
    fig.add_bar(
        x=saved,
        y=titles,
        orientation="h",
        name="Saved",
        marker=dict(color=saved_colors),
        hovertemplate=f"%{{y}}<br>Saved: {currency} %{{x:,.2f}}<extra></extra>",
    )
    fig.add_bar(
        x=remaining,
        y=titles,
        orientation="h",
        name="Remaining",
        marker=dict(color=TOKENS.gridline_color(dark_mode)),
        hovertemplate=f"%{{y}}<br>Remaining: {currency} %{{x:,.2f}}<extra></extra>",
    )
    fig.update_layout(
        barmode="stack",
        margin=dict(l=0, r=10, t=20, b=0),
        xaxis=dict(title=f"Amount ({currency})", showgrid=False, zeroline=False),
        yaxis=dict(automargin=True, autorange="reversed", tickfont=dict(color=TOKENS.text_color(dark_mode))),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, x=0),
        bargap=0.35,
        height=max(180, 48 * len(goals)),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig
