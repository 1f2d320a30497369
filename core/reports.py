"""Financial report assembly, PDF rendering and JSON snapshot export/import."""

from __future__ import annotations

import io
import json
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from analytics.summary import RANGE_LABELS, category_breakdown, filter_by_range, split_totals
from core.formatting import format_currency, format_date, format_signed
from core.models import FinanceSnapshot
from core.validation import SnapshotImport, ValidationError, validate_snapshot

__all__ = [
    "Report",
    "build_report",
    "export_filename",
    "export_snapshot",
    "parse_snapshot",
    "report_filename",
    "report_to_pdf",
]


@dataclass(frozen=True)
class Report:
    date_range: str
    label: str
    category: str
    categories: list[str]
    transactions: pd.DataFrame
    income: float
    expenses: float
    savings: float
    breakdown: pd.DataFrame

    @property
    def is_empty(self) -> bool:
        return self.transactions.empty


def build_report(
    df: pd.DataFrame,
    date_range: str = "month",
    category: str = "all",
    today: date | None = None,
) -> Report:
    """Filter by range and category, then total and break down the result."""

    categories = sorted(df["category"].dropna().unique().tolist()) if not df.empty else []
    filtered = filter_by_range(df, date_range, today)
    if category != "all" and not filtered.empty:
        filtered = filtered[filtered["category"] == category]
    filtered = filtered.sort_values("date", ascending=False, kind="stable")

    income, expenses = split_totals(filtered)
    return Report(
        date_range=date_range,
        label=RANGE_LABELS.get(date_range, "Selected Period"),
        category=category,
        categories=categories,
        transactions=filtered.reset_index(drop=True),
        income=income,
        expenses=expenses,
        savings=income - expenses,
        breakdown=category_breakdown(filtered),
    )


def report_filename(date_range: str, today: date | None = None) -> str:
    return f"budget-report-{date_range}-{(today or date.today()).isoformat()}.pdf"


def _styled_table(rows: list[list[str]], col_widths: list[float]) -> Table:
    table = Table(rows, colWidths=col_widths, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2563EB")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F4F6FB")]),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#E6EAF2")),
                ("ALIGN", (-1, 1), (-1, -1), "RIGHT"),
            ]
        )
    )
    return table


def report_to_pdf(report: Report, currency: str = "PKR", generated: date | None = None) -> bytes:
    """Render ``report`` to PDF bytes with summary, category and transaction tables."""

    generated = generated or date.today()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=f"Financial Report - {report.label}",
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
    )
    styles = getSampleStyleSheet()
    elements: list[Any] = [
        Paragraph(f"Financial Report - {report.label}", styles["Title"]),
        Paragraph(f"Generated on {format_date(generated)} | Currency: {currency}", styles["Normal"]),
    ]
    if report.category != "all":
        elements.append(Paragraph(f"Category: {report.category}", styles["Normal"]))
    elements.append(Spacer(1, 0.25 * inch))

    elements.append(Paragraph("Summary", styles["Heading2"]))
    elements.append(
        _styled_table(
            [
                ["Metric", "Amount"],
                ["Total Income", format_currency(report.income, currency)],
                ["Total Expenses", format_currency(report.expenses, currency)],
                ["Net Savings", ("-" if report.savings < 0 else "") + format_currency(report.savings, currency)],
            ],
            [3 * inch, 2 * inch],
        )
    )

    if not report.breakdown.empty:
        elements.append(Spacer(1, 0.2 * inch))
        elements.append(Paragraph("Expense Breakdown by Category", styles["Heading2"]))
        rows = [["Category", "Share", "Amount"]]
        for item in report.breakdown.itertuples(index=False):
            rows.append([str(item.Category), f"{item.Share * 100:.1f}%", format_currency(item.Amount, currency)])
        elements.append(_styled_table(rows, [2.5 * inch, 1 * inch, 2 * inch]))

    elements.append(Spacer(1, 0.2 * inch))
    elements.append(
        Paragraph(f"Transaction Details ({len(report.transactions)} transactions)", styles["Heading2"])
    )
    if report.is_empty:
        elements.append(Paragraph("No transactions found for the selected criteria.", styles["Normal"]))
    else:
        rows = [["Date", "Category", "Type", "Amount"]]
        for item in report.transactions.itertuples(index=False):
            rows.append(
                [
                    format_date(item.date),
                    str(item.category),
                    str(item.type).title(),
                    format_signed(item.amount, item.type, currency),
                ]
            )
        elements.append(_styled_table(rows, [1.5 * inch, 1.6 * inch, 1 * inch, 1.6 * inch]))

    def _footer(canvas, document) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(colors.grey)
        canvas.drawString(document.leftMargin, 0.5 * inch, "BudgetMate")
        canvas.drawRightString(A4[0] - document.rightMargin, 0.5 * inch, f"Page {document.page}")
        canvas.restoreState()

    doc.build(elements, onFirstPage=_footer, onLaterPages=_footer)
    return buffer.getvalue()


def export_filename(today: date | None = None) -> str:
    return f"budget-tracker-export-{(today or date.today()).isoformat()}.json"


def export_snapshot(snapshot: FinanceSnapshot, now: datetime | None = None) -> str:
    """Serialise the user's data as indented JSON for download."""

    payload = {
        "transactions": [txn.to_row() for txn in snapshot.transactions],
        "budgets": dict(snapshot.budgets),
        "goals": [goal.to_row() for goal in snapshot.goals],
        "settings": snapshot.settings.to_row(),
        "exportDate": (now or datetime.now()).isoformat(),
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def parse_snapshot(text: str | bytes) -> SnapshotImport:
    """Decode an uploaded export file and validate every section of it."""

    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError("Invalid file format. Please select a valid JSON file.") from exc
    return validate_snapshot(data)
