from __future__ import annotations

from datetime import date

import pytest

from core.validation import (
    ValidationError,
    auth_error_message,
    parse_amount,
    validate_goal,
    validate_sign_in,
    validate_sign_up,
    validate_transaction,
    validate_username,
)


def test_parse_amount_accepts_separators_and_blanks():
    assert parse_amount("1,250.50") == 1250.5
    assert parse_amount(" ") is None
    assert parse_amount("abc") is None
    assert parse_amount(12) == 12.0


@pytest.mark.parametrize(
    ("email", "password", "confirm", "message"),
    [
        ("", "secret1", "secret1", "Please fill in all fields"),
        ("amina.example.com", "secret1", "secret1", "valid email"),
        ("amina@example.com", "secret1", "secret2", "Passwords do not match"),
        ("amina@example.com", "abc", "abc", "at least 6 characters"),
    ],
)
def test_sign_up_rules(email, password, confirm, message):
    with pytest.raises(ValidationError, match=message):
        validate_sign_up(email, password, confirm)


def test_sign_up_strips_email():
    assert validate_sign_up(" amina@example.com ", "secret1", "secret1") == "amina@example.com"


def test_sign_in_requires_plausible_credentials():
    assert validate_sign_in("amina@example.com", "secret1") == "amina@example.com"
    with pytest.raises(ValidationError):
        validate_sign_in("amina@example.com", "")
    with pytest.raises(ValidationError):
        validate_sign_in("amina", "secret1")


def test_transaction_validation():
    form = validate_transaction("250", "expense", "Food", date(2024, 3, 1), "  lunch ")

    assert form.amount == 250.0
    assert form.notes == "lunch"

    with pytest.raises(ValidationError, match="valid amount"):
        validate_transaction("-5", "expense", "Food")
    with pytest.raises(ValidationError, match="required fields"):
        validate_transaction("10", "expense", "")
    with pytest.raises(ValidationError, match="Unknown income category"):
        validate_transaction("10", "income", "Rent")


def test_goal_validation():
    today = date(2024, 3, 12)
    form = validate_goal("Car", "5000", "", date(2024, 12, 1), today)

    assert form.current_amount == 0.0

    with pytest.raises(ValidationError, match="greater than target"):
        validate_goal("Car", "100", "200", date(2024, 12, 1), today)
    with pytest.raises(ValidationError, match="today or in the future"):
        validate_goal("Car", "100", "0", date(2024, 3, 11), today)
    with pytest.raises(ValidationError, match="greater than 0"):
        validate_goal("Car", "0", "0", date(2024, 12, 1), today)


def test_username_must_not_be_blank():
    assert validate_username("  amina ") == "amina"
    with pytest.raises(ValidationError):
        validate_username("   ")


def test_auth_error_messages_are_friendly():
    assert "Invalid email or password" in auth_error_message("Invalid login credentials")
    assert "already exists" in auth_error_message("User already registered", signing_up=True)
    assert auth_error_message("") == "Failed to sign in. Please try again."
