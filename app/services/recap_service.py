import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.collaborator import Collaborator, Workload
from app.models.project import Project
from app.schemas.recap import RecapMonthRead, RecapProjectRead, RecapResponse

logger = logging.getLogger(__name__)


@dataclass
class LedgerRow:
    """A ledger entry joined with its collaborator's rate and project name."""
    month: str
    year: int
    project_id: Any
    project_name: Optional[str]
    days_worked: float
    daily_rate: Optional[float]

    @property
    def cost(self) -> float:
        return (self.days_worked or 0) * (self.daily_rate or 0)


def aggregate_recap(rows: Iterable[LedgerRow], year: int, month: Optional[str] = None) -> List[RecapMonthRead]:
    """Group ledger rows by (month, project) and then by month.

    Rows outside ``year`` (and ``month`` when given) are ignored. A project
    keeps the first name seen for it; months come out in ascending order and
    projects inside a month in order of first appearance.
    """
    groups: Dict[Tuple[str, Any], Dict[str, Any]] = {}
    for row in rows:
        if row.year != year or (month is not None and row.month != month):
            continue
        key = (row.month, row.project_id)
        group = groups.get(key)
        if group is None:
            group = groups[key] = {"name": row.project_name, "total_cost": 0.0}
        group["total_cost"] += row.cost

    by_month: Dict[str, List[RecapProjectRead]] = {}
    for (row_month, project_id), group in groups.items():
        by_month.setdefault(row_month, []).append(RecapProjectRead(
            id=project_id,
            name=group["name"],
            total_cost=group["total_cost"],
        ))

    return [
        RecapMonthRead(
            month=row_month,
            year=year,
            projects=projects,
            total_month_cost=sum(p.total_cost for p in projects),
        )
        for row_month, projects in sorted(by_month.items())
    ]


async def load_ledger_rows(session: AsyncSession, year: int) -> List[LedgerRow]:
    # Comment-only placeholders carry no project and no days; they stay out.
    stmt = (
        select(
            Workload.month,
            Workload.year,
            Workload.project_id,
            Project.name,
            Workload.days_worked,
            Collaborator.daily_rate,
        )
        .join(Collaborator, Workload.collaborator_id == Collaborator.id)
        .outerjoin(Project, Workload.project_id == Project.id)
        .where(Workload.year == year, Workload.project_id.is_not(None))
        .order_by(Collaborator.id, Workload.id)
    )
    result = await session.execute(stmt)
    return [LedgerRow(*row) for row in result.all()]


async def compute_recap(session: AsyncSession, year: int, month: Optional[str] = None) -> RecapResponse:
    rows = await load_ledger_rows(session, year)
    months = aggregate_recap(rows, year, month)
    logger.info("Recap computed", extra={"year": year, "month": month, "rows": len(rows), "months": len(months)})
    return RecapResponse(
        year=year,
        months=months,
        total_year_cost=sum(m.total_month_cost for m in months),
    )
