"""Collaborator directory: CRUD on the collaborator aggregate and its ledger.

Ledger mutations (days, comments) are load-then-save: two concurrent writers
on the same collaborator can overwrite each other's change. An atomic
conditional upsert on the workload table would close that window.
"""
import logging
import math
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import commit_or_fail
from app.core.exceptions import NotFound, ValidationError
from app.models.collaborator import Collaborator, CollaboratorProject
from app.schemas.collaborator import CollaboratorRead, StaticProjectRead
from app.services import ledger
from app.services.project_service import get_project_names, resolve_projects_by_ids

logger = logging.getLogger(__name__)

# Marks "leave the daily rate untouched" on update
UNSET: Any = object()


def current_period(today: Optional[date] = None) -> Tuple[str, int]:
    today = today or date.today()
    return f"{today.month:02d}", today.year


def _validate_rate(rate: Optional[float], required: bool = False) -> None:
    if rate is None:
        if required:
            raise ValidationError("Daily rate must be a positive number")
        return
    if not math.isfinite(rate) or rate < 0:
        raise ValidationError("Daily rate must be a positive number")


async def _check_projects_exist(session: AsyncSession, project_ids: List[int]) -> List[int]:
    """Deduplicated ids in request order; ValidationError if any is unknown."""
    wanted = list(dict.fromkeys(project_ids))
    found = await resolve_projects_by_ids(session, wanted)
    if len(found) != len(wanted):
        missing = [pid for pid in wanted if pid not in found]
        logger.info("Unknown projects requested", extra={"missing": missing})
        raise ValidationError("One or more projects do not exist")
    return wanted


async def get_collaborator(session: AsyncSession, collaborator_id: int) -> Collaborator:
    collaborator = await session.get(Collaborator, collaborator_id)
    if not collaborator:
        raise NotFound(f"Collaborator {collaborator_id} not found")
    return collaborator


async def list_collaborators(session: AsyncSession) -> List[Collaborator]:
    result = await session.execute(select(Collaborator).order_by(Collaborator.id))
    return result.scalars().all()


async def to_read(session: AsyncSession, collaborator: Collaborator) -> CollaboratorRead:
    names = await get_project_names(session, [a.project_id for a in collaborator.projects])
    return CollaboratorRead(
        id=collaborator.id,
        name=collaborator.name,
        daily_rate=collaborator.daily_rate,
        projects=[
            StaticProjectRead(id=a.project_id, name=names.get(a.project_id), static_days_worked=a.static_days_worked)
            for a in collaborator.projects
        ],
    )


async def create_collaborator(
    session: AsyncSession,
    name: str,
    project_ids: List[int],
    daily_rate: Optional[float] = None,
) -> Collaborator:
    project_ids = await _check_projects_exist(session, project_ids)
    _validate_rate(daily_rate)

    collaborator = Collaborator(
        name=name,
        daily_rate=daily_rate,
        projects=[CollaboratorProject(project_id=pid, static_days_worked=0) for pid in project_ids],
        workloads=[],
    )
    session.add(collaborator)
    await commit_or_fail(session)
    logger.info("Collaborator created", extra={"collaborator_id": collaborator.id, "projects": project_ids})
    return collaborator


async def update_collaborator(
    session: AsyncSession,
    collaborator_id: int,
    name: str,
    project_ids: List[int],
    daily_rate: Optional[float] = UNSET,
) -> Collaborator:
    project_ids = await _check_projects_exist(session, project_ids)
    if daily_rate is not UNSET:
        _validate_rate(daily_rate)
    collaborator = await get_collaborator(session, collaborator_id)

    # Dropped assignments go away; their ledger entries stay.
    current = {a.project_id: a for a in collaborator.projects}
    collaborator.projects = [
        current.get(pid) or CollaboratorProject(project_id=pid, static_days_worked=0)
        for pid in project_ids
    ]
    collaborator.name = name
    if daily_rate is not UNSET:
        collaborator.daily_rate = daily_rate

    session.add(collaborator)
    await commit_or_fail(session)
    logger.info("Collaborator updated", extra={"collaborator_id": collaborator_id, "projects": project_ids})
    return collaborator


async def delete_collaborator(session: AsyncSession, collaborator_id: int) -> None:
    collaborator = await get_collaborator(session, collaborator_id)
    await session.delete(collaborator)
    await commit_or_fail(session)
    logger.info("Collaborator deleted", extra={"collaborator_id": collaborator_id})


async def set_daily_rate(session: AsyncSession, collaborator_id: int, rate: Optional[float]) -> Collaborator:
    _validate_rate(rate, required=True)
    collaborator = await get_collaborator(session, collaborator_id)
    collaborator.daily_rate = rate
    session.add(collaborator)
    await commit_or_fail(session)
    logger.info("Daily rate updated", extra={"collaborator_id": collaborator_id, "daily_rate": rate})
    return collaborator


async def list_rates(session: AsyncSession) -> List[Dict[str, Any]]:
    """Name and daily rate of every collaborator, without loading the ledger."""
    result = await session.execute(
        select(Collaborator.id, Collaborator.name, Collaborator.daily_rate).order_by(Collaborator.id)
    )
    return [{"id": i, "name": n, "daily_rate": r} for i, n, r in result.all()]


async def record_days(
    session: AsyncSession,
    collaborator_id: int,
    project_id: int,
    days: Optional[float],
    month: str,
    year: int,
) -> Collaborator:
    ledger.validate_days(days)
    collaborator = await get_collaborator(session, collaborator_id)
    entry = ledger.upsert_days(collaborator, project_id, days, month, year)
    session.add(collaborator)
    await commit_or_fail(session)
    logger.info(
        "Days recorded",
        extra={"collaborator_id": collaborator_id, "project_id": project_id, "month": month, "year": year, "days": entry.days_worked},
    )
    return collaborator


async def upsert_comment(session: AsyncSession, collaborator_id: int, comment: str, month: str, year: int) -> Collaborator:
    collaborator = await get_collaborator(session, collaborator_id)
    ledger.upsert_comment(collaborator, comment, month, year)
    session.add(collaborator)
    await commit_or_fail(session)
    logger.info("Comment updated", extra={"collaborator_id": collaborator_id, "month": month, "year": year})
    return collaborator


async def get_monthly_view(session: AsyncSession, collaborator_id: int, month: str, year: int) -> ledger.MonthlyView:
    collaborator = await get_collaborator(session, collaborator_id)
    names = await get_project_names(session, [a.project_id for a in collaborator.projects])
    return ledger.resolve_monthly_view(collaborator, month, year, names)


async def list_monthly_views(session: AsyncSession, month: str, year: int) -> List[ledger.MonthlyView]:
    collaborators = await list_collaborators(session)
    names = await get_project_names(session, [a.project_id for c in collaborators for a in c.projects])
    return [ledger.resolve_monthly_view(c, month, year, names) for c in collaborators]
