from __future__ import annotations

import json
from datetime import date, datetime

import pytest

from core.models import FinanceSnapshot, UserSettings
from core.reports import (
    build_report,
    export_filename,
    export_snapshot,
    parse_snapshot,
    report_filename,
    report_to_pdf,
)
from core.validation import SnapshotImport, ValidationError

TODAY = date(2024, 3, 12)


def test_build_report_filters_by_range_and_category(sample_frame):
    report = build_report(sample_frame, "month", "Food", TODAY)

    assert report.label == "This Month"
    assert report.transactions["id"].tolist() == ["t4", "t3"]
    assert report.expenses == pytest.approx(450.0)
    assert report.income == 0.0
    assert report.savings == pytest.approx(-450.0)
    assert "Salary" in report.categories


def test_build_report_all_time_breakdown(sample_frame):
    report = build_report(sample_frame, "all", today=TODAY)

    assert len(report.transactions) == 10
    assert report.transactions["date"].is_monotonic_decreasing
    assert report.breakdown["Category"].iloc[0] == "Rent"


def test_report_pdf_renders(sample_frame):
    pdf = report_to_pdf(build_report(sample_frame, "all", today=TODAY), "PKR", TODAY)

    assert pdf.startswith(b"%PDF")


def test_empty_report_still_renders(sample_frame):
    report = build_report(sample_frame, "week", "Salary", TODAY)

    assert report.is_empty
    assert report_to_pdf(report, "$", TODAY).startswith(b"%PDF")


def test_filenames_carry_the_date():
    assert report_filename("week", TODAY) == "budget-report-week-2024-03-12.pdf"
    assert export_filename(TODAY) == "budget-tracker-export-2024-03-12.json"


def test_export_snapshot_layout(sample_transactions):
    snapshot = FinanceSnapshot(
        transactions=sample_transactions[:2],
        budgets={"Food": 500.0},
        settings=UserSettings(dark_mode=False, currency="AED"),
    )

    payload = json.loads(export_snapshot(snapshot, datetime(2024, 3, 12, 10, 30)))

    assert set(payload) == {"transactions", "budgets", "goals", "settings", "exportDate"}
    assert payload["transactions"][0]["date"] == "2024-03-01"
    assert payload["budgets"] == {"Food": 500.0}
    assert payload["settings"] == {"dark_mode": False, "currency": "AED"}
    assert payload["exportDate"] == "2024-03-12T10:30:00"


def test_parse_snapshot_rejects_invalid_json():
    assert parse_snapshot(b'{"budgets": {}}') == SnapshotImport(budgets={})
    with pytest.raises(ValidationError, match="valid JSON file"):
        parse_snapshot("not json")
    with pytest.raises(ValidationError):
        parse_snapshot("[1, 2, 3]")


def test_parse_snapshot_normalises_sections():
    parsed = parse_snapshot(
        json.dumps(
            {
                "transactions": [
                    {"id": "7", "amount": "1,200", "type": "income", "category": "Salary", "date": "2024-03-01T08:00"}
                ],
                "goals": [],
                "settings": {"dark_mode": 0, "currency": "$"},
            }
        )
    )

    assert parsed.transactions == [
        {"amount": 1200.0, "type": "income", "category": "Salary", "date": "2024-03-01", "notes": ""}
    ]
    assert parsed.goals == []
    assert parsed.budgets is None
    assert parsed.dark_mode is False


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"budgets": {"Food": None}}, "budget for Food"),
        ({"goals": {"title": "x"}}, "'goals' must be a list"),
        ({"transactions": [{"amount": -5}]}, "transaction 1 has an invalid amount"),
        ({"goals": [{"title": "Car", "target_amount": 10, "target_date": "soon"}]}, "goal 1 has an invalid date"),
        ({"transactions": [{"amount": "NaN"}]}, "invalid amount"),
    ],
)
def test_parse_snapshot_rejects_malformed_sections(payload, message):
    with pytest.raises(ValidationError, match=message):
        parse_snapshot(json.dumps(payload))
