from typing import List

from app.schemas.collaborator import ExportResponse, ExportRow
from app.services.ledger import MonthlyView

MONTH_NAMES = {
    "01": "January",
    "02": "February",
    "03": "March",
    "04": "April",
    "05": "May",
    "06": "June",
    "07": "July",
    "08": "August",
    "09": "September",
    "10": "October",
    "11": "November",
    "12": "December",
}

UNDEFINED = "Undefined"


def format_amount(value: float) -> str:
    return f"{value:,.2f} €"


def format_days(value: float) -> str:
    return f"{value:g}"


def export_file_name(month: str, year: int) -> str:
    return f"Collaborator_Tracking_{MONTH_NAMES.get(month, 'Unknown')}_{year}"


def build_export_row(view: MonthlyView) -> ExportRow:
    names = [p.name or "Unknown project" for p in view.projects]
    if view.daily_rate:
        costs = [format_amount(p.days_worked * view.daily_rate) for p in view.projects]
    else:
        costs = [UNDEFINED for _ in view.projects]
    total_cost = view.total_cost

    return ExportRow(
        name=view.name,
        projects=", ".join(names) or "No project",
        days_per_project=", ".join(
            f"{name}: {format_days(p.days_worked)} days" for name, p in zip(names, view.projects)
        ) or "None",
        cost_per_project=", ".join(costs) or UNDEFINED,
        total_days=view.total_days,
        total_cost=format_amount(total_cost) if total_cost else UNDEFINED,
        comment=view.comment or "No comment",
        month=view.month,
    )


def build_export(views: List[MonthlyView], month: str, year: int) -> ExportResponse:
    return ExportResponse(
        file_name=export_file_name(month, year),
        rows=[build_export_row(v) for v in views],
    )
