from app.services.export_service import build_export, build_export_row, export_file_name, format_amount
from app.services.ledger import MonthlyProjectDays, MonthlyView


def view(projects, daily_rate=500, comment=""):
    return MonthlyView(
        collaborator_id=1,
        name="Alice",
        daily_rate=daily_rate,
        month="03",
        year=2025,
        comment=comment,
        projects=[MonthlyProjectDays(project_id=i, name=n, days_worked=d) for i, n, d in projects],
    )


def test_file_name_uses_month_name():
    assert export_file_name("03", 2025) == "Collaborator_Tracking_March_2025"
    assert export_file_name("12", 2024) == "Collaborator_Tracking_December_2024"


def test_amount_formatting():
    assert format_amount(7500) == "7,500.00 €"
    assert format_amount(0.5) == "0.50 €"


def test_row_with_rate():
    row = build_export_row(view([(1, "ProjA", 10), (2, "ProjB", 5)], comment="on site"))

    assert row.name == "Alice"
    assert row.projects == "ProjA, ProjB"
    assert row.days_per_project == "ProjA: 10 days, ProjB: 5 days"
    assert row.cost_per_project == "5,000.00 €, 2,500.00 €"
    assert row.total_days == 15
    assert row.total_cost == "7,500.00 €"
    assert row.comment == "on site"
    assert row.month == "03"


def test_row_without_rate_or_projects():
    row = build_export_row(view([], daily_rate=None))

    assert row.projects == "No project"
    assert row.days_per_project == "None"
    assert row.cost_per_project == "Undefined"
    assert row.total_days == 0
    assert row.total_cost == "Undefined"
    assert row.comment == "No comment"


def test_row_unknown_project_name():
    row = build_export_row(view([(7, None, 1.5)], daily_rate=None))

    assert row.projects == "Unknown project"
    assert row.days_per_project == "Unknown project: 1.5 days"
    assert row.cost_per_project == "Undefined"


def test_export_keeps_collaborator_order():
    first = view([(1, "ProjA", 1)])
    second = view([(2, "ProjB", 2)])
    second.name = "Bob"

    export = build_export([first, second], "03", 2025)

    assert export.file_name == "Collaborator_Tracking_March_2025"
    assert [r.name for r in export.rows] == ["Alice", "Bob"]
