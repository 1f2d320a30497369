"""Savings goals: create, edit, contribute to and delete goals."""

from __future__ import annotations

import streamlit as st

from analytics import days_remaining, due_phrase, goal_progress, goals_overview
from app.layout import card, page_header
from app.state import get_repository, invalidate_snapshot
from backend import BackendError
from core.formatting import format_currency, format_date
from core.models import GOAL_QUICK_CONTRIBUTIONS, FinanceSnapshot, SavingsGoal
from core.validation import ValidationError, validate_goal, validate_positive_amount
from visualization import build_goal_chart

EDITING_KEY = "editing_goal_id"


def _render_goal_form(editing: SavingsGoal | None, currency: str) -> None:
    title = "Edit Goal" if editing else "New Goal"
    with card(title):
        with st.form("goal_form", clear_on_submit=editing is None):
            name = st.text_input("Goal title", value=editing.title if editing else "")
            target = st.text_input(
                f"Target amount ({currency})",
                value=f"{editing.target_amount:g}" if editing else "",
            )
            current = st.text_input(
                f"Already saved ({currency})",
                value=f"{editing.current_amount:g}" if editing else "0",
            )
            target_date = st.date_input("Target date", value=editing.target_date if editing else None)
            save_col, cancel_col = st.columns(2)
            submitted = save_col.form_submit_button(
                "Update Goal" if editing else "Add Goal", use_container_width=True
            )
            cancelled = cancel_col.form_submit_button("Cancel", use_container_width=True) if editing else False

    if cancelled:
        st.session_state.pop(EDITING_KEY, None)
        st.rerun()
    if not submitted:
        return

    try:
        form = validate_goal(name, target, current, target_date)
        repository = get_repository()
        if editing:
            repository.update_goal(
                editing.id,
                title=form.title,
                target_amount=form.target_amount,
                current_amount=form.current_amount,
                target_date=form.target_date,
            )
        else:
            repository.add_goal(form.title, form.target_amount, form.target_date, form.current_amount)
    except ValidationError as exc:
        st.error(str(exc))
        return
    except BackendError:
        st.error("An error occurred while saving the goal. Please try again.")
        return

    st.session_state.pop(EDITING_KEY, None)
    invalidate_snapshot()
    st.toast("Goal updated successfully!" if editing else "Goal added successfully!")
    st.rerun()


def _contribute(goal: SavingsGoal, amount: float, currency: str) -> None:
    try:
        updated = get_repository().contribute_to_goal(goal, amount)
    except ValidationError as exc:
        st.info(str(exc))
        return
    except BackendError:
        st.error("Failed to add contribution. Please try again.")
        return

    invalidate_snapshot()
    if updated.is_completed:
        st.toast(f"🎉 Congratulations! You've completed your goal: {goal.title}!")
        st.balloons()
    else:
        st.toast(f"Added {format_currency(amount, currency)} to {goal.title}!")
    st.rerun()


def _render_goal(goal: SavingsGoal, currency: str) -> None:
    progress = goal_progress(goal.current_amount, goal.target_amount)
    suffix = "Completed 🎉" if goal.is_completed else due_phrase(days_remaining(goal.target_date))

    with card(goal.title, suffix=suffix):
        st.markdown(
            f"<div class='bm-row'><span>{format_currency(goal.current_amount, currency)} of "
            f"{format_currency(goal.target_amount, currency)}</span><span>{progress:.0f}%</span></div>",
            unsafe_allow_html=True,
        )
        st.progress(progress / 100)
        st.caption(f"Target date: {format_date(goal.target_date)}")

        if not goal.is_completed:
            quick_cols = st.columns(len(GOAL_QUICK_CONTRIBUTIONS))
            for col, amount in zip(quick_cols, GOAL_QUICK_CONTRIBUTIONS):
                if col.button(f"+{amount}", key=f"goal-{goal.id}-quick-{amount}", use_container_width=True):
                    _contribute(goal, float(amount), currency)

            custom_col, add_col = st.columns([3, 1], vertical_alignment="bottom")
            custom = custom_col.text_input(
                "Custom amount",
                key=f"goal-{goal.id}-custom",
                placeholder="Enter amount",
            )
            if add_col.button("Add", key=f"goal-{goal.id}-add", use_container_width=True):
                try:
                    amount = validate_positive_amount(custom, "Contribution amount must be greater than 0")
                except ValidationError as exc:
                    st.error(str(exc))
                else:
                    _contribute(goal, amount, currency)

        edit_col, delete_col = st.columns(2)
        if edit_col.button("✏️ Edit", key=f"goal-{goal.id}-edit", use_container_width=True):
            st.session_state[EDITING_KEY] = goal.id
            st.rerun()
        if delete_col.button("🗑️ Delete", key=f"goal-{goal.id}-delete", use_container_width=True):
            try:
                get_repository().delete_goal(goal.id)
            except BackendError as exc:
                st.error(f"Failed to delete goal: {exc}")
                return
            invalidate_snapshot()
            st.toast("Goal deleted")
            st.rerun()


def render_page(snapshot: FinanceSnapshot) -> None:
    """Render the savings goals page."""

    currency = snapshot.settings.currency
    page_header("Savings Goals", "Set targets and track your progress.")

    overview = goals_overview(snapshot.goals)
    cols = st.columns(3)
    cols[0].metric("Total Saved", format_currency(overview["saved"], currency))
    cols[1].metric("Total Target", format_currency(overview["target"], currency))
    cols[2].metric("Completed", f"{overview['completed']} / {len(snapshot.goals)}")

    editing_id = st.session_state.get(EDITING_KEY)
    editing = next((goal for goal in snapshot.goals if goal.id == editing_id), None)
    _render_goal_form(editing, currency)

    if not snapshot.goals:
        st.info("No savings goals yet. Add your first goal above!")
        return

    with card("Goal Progress"):
        chart = build_goal_chart(snapshot.goals, currency, snapshot.settings.dark_mode)
        st.plotly_chart(chart, use_container_width=True, key="goal-progress-bars")

    for goal in snapshot.goals:
        _render_goal(goal, currency)


__all__ = ["render_page"]
