"""FinanceRepository behaviour against the in-memory table store."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from core.reports import export_snapshot, parse_snapshot
from core.validation import ValidationError, validate_transaction

NOW = datetime(2024, 3, 12, 9, 0, tzinfo=timezone.utc)
FOOD_ROW = {"amount": 75, "type": "expense", "category": "Food", "date": "2024-03-05"}


def test_load_snapshot_creates_default_settings_and_profile(repository, gateway):
    snapshot = repository.load_snapshot()

    assert snapshot.settings.currency == "PKR"
    assert snapshot.settings.dark_mode is True
    assert snapshot.username == "amina"
    assert len(gateway.tables["user_settings"]) == 1
    assert len(gateway.tables["user_profiles"]) == 1

    repository.load_snapshot()
    assert len(gateway.tables["user_settings"]) == 1


def test_transactions_are_scoped_to_the_user(repository, gateway):
    repository.add_transaction(validate_transaction("120", "expense", "Food", date(2024, 3, 1)))
    gateway.insert("transactions", [{"user_id": "someone-else", "amount": 5, "type": "expense", "category": "Food"}])

    transactions = repository.load_transactions()

    assert [txn.amount for txn in transactions] == [120.0]
    assert transactions[0].date == date(2024, 3, 1)


def test_delete_transaction(repository):
    txn = repository.add_transaction(validate_transaction("50", "income", "Gift", date(2024, 3, 1)))

    repository.delete_transaction(txn.id)

    assert repository.load_transactions() == []


def test_replace_budgets_keeps_only_positive_limits(repository, gateway):
    repository.replace_budgets({"Food": 500, "Rent": 0})
    stored = repository.replace_budgets({"Food": 400, "Transport": 150, "Health": 0})

    assert stored == {"Food": 400.0, "Transport": 150.0}
    assert repository.load_budgets() == {"Food": 400.0, "Transport": 150.0}
    assert len(gateway.tables["budgets"]) == 2


def test_goal_lifecycle(repository):
    goal = repository.add_goal("Laptop", 1000.0, date(2024, 12, 31), 900.0)

    updated = repository.contribute_to_goal(goal, 250.0)
    assert updated.current_amount == 1000.0
    assert updated.is_completed
    assert updated.updated_at is not None

    with pytest.raises(ValidationError):
        repository.contribute_to_goal(updated, 25.0)

    renamed = repository.update_goal(goal.id, title="New laptop", target_date=date(2025, 1, 31))
    assert renamed.title == "New laptop"
    assert renamed.target_date == date(2025, 1, 31)

    repository.delete_goal(goal.id)
    assert repository.load_goals() == []


def test_username_cooldown(repository):
    profile = repository.load_profile()

    profile = repository.update_username(profile, "amina_k", now=NOW)
    assert profile.username == "amina_k"

    with pytest.raises(ValidationError, match="again in 5 days"):
        repository.update_username(profile, "amina_b", now=NOW + timedelta(days=10))

    profile = repository.update_username(profile, "amina_b", now=NOW + timedelta(days=15))
    assert profile.username == "amina_b"


def test_currency_can_change_once_with_password(repository):
    profile = repository.load_profile()
    repository.load_settings()

    with pytest.raises(ValidationError, match="Invalid password"):
        repository.update_currency(profile, "AED", "wrong-password", now=NOW)

    settings, profile = repository.update_currency(profile, "AED", "secret123", now=NOW)
    assert settings.currency == "AED"
    assert profile.currency_changed is True

    with pytest.raises(ValidationError, match="cannot be modified again"):
        repository.update_currency(profile, "$", "secret123", now=NOW)


def test_add_donation_tags_month(repository):
    donation = repository.add_donation(500.0, today=date(2024, 3, 12))

    assert donation.month_year == "2024-03"
    assert [d.amount for d in repository.load_donations()] == [500.0]


def test_import_snapshot_ignores_currency(repository):
    repository.load_settings()
    repository.import_snapshot(
        {
            "transactions": [
                {"amount": 75, "type": "expense", "category": "Food", "date": "2024-03-05T00:00:00", "notes": ""},
            ],
            "budgets": {"Food": 300},
            "goals": [{"title": "Hajj", "target_amount": 2000, "current_amount": 100, "target_date": "2025-06-01"}],
            "settings": {"dark_mode": False, "currency": "$"},
        }
    )

    snapshot = repository.load_snapshot()
    assert [txn.date for txn in snapshot.transactions] == [date(2024, 3, 5)]
    assert snapshot.budgets == {"Food": 300.0}
    assert snapshot.goals[0].title == "Hajj"
    assert snapshot.settings.dark_mode is False
    assert snapshot.settings.currency == "PKR"


def test_importing_an_export_restores_instead_of_duplicating(repository):
    repository.add_transaction(validate_transaction("75", "expense", "Food", date(2024, 3, 5)))
    repository.add_goal("Hajj", 2000.0, date(2025, 6, 1), current_amount=100.0)
    exported = export_snapshot(repository.load_snapshot(), NOW)

    repository.add_transaction(validate_transaction("20", "expense", "Transport", date(2024, 3, 6)))
    repository.import_snapshot(parse_snapshot(exported))
    repository.import_snapshot(parse_snapshot(exported))

    snapshot = repository.load_snapshot()
    assert [(txn.amount, txn.category) for txn in snapshot.transactions] == [(75.0, "Food")]
    assert [(goal.title, goal.current_amount) for goal in snapshot.goals] == [("Hajj", 100.0)]


def test_import_without_a_section_keeps_stored_rows(repository):
    repository.add_transaction(validate_transaction("75", "expense", "Food", date(2024, 3, 5)))

    repository.import_snapshot({"budgets": {"Food": 250}})

    snapshot = repository.load_snapshot()
    assert len(snapshot.transactions) == 1
    assert snapshot.budgets == {"Food": 250.0}


@pytest.mark.parametrize(
    "payload",
    [
        {"transactions": [FOOD_ROW], "budgets": {"Food": None}},
        {"transactions": [FOOD_ROW], "goals": {"title": "x"}},
    ],
)
def test_invalid_import_writes_nothing(repository, gateway, payload):
    repository.add_goal("Bike", 300.0, date(2024, 9, 1))

    with pytest.raises(ValidationError):
        repository.import_snapshot(payload)

    assert gateway.tables.get("transactions", []) == []
    assert len(gateway.tables["savings_goals"]) == 1


def test_clear_all_data_keeps_settings(repository):
    repository.add_transaction(validate_transaction("10", "expense", "Food", date(2024, 3, 1)))
    repository.replace_budgets({"Food": 100})
    repository.add_goal("Bike", 300.0, date(2024, 9, 1))
    repository.load_settings()

    repository.clear_all_data()

    snapshot = repository.load_snapshot()
    assert snapshot.transactions == []
    assert snapshot.budgets == {}
    assert snapshot.goals == []
    assert len(repository.gateway.tables["user_settings"]) == 1
