from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.schemas.collaborator import (
    CollaboratorCreate,
    CollaboratorMonthlyRead,
    CollaboratorRead,
    CollaboratorUpdate,
    CommentUpdate,
    DaysWorkedUpdate,
    ExportResponse,
    MonthlyProjectRead,
)
from app.services import collaborator_service as service
from app.services.export_service import build_export
from app.services.ledger import MonthlyView

router = APIRouter(prefix="/collaborators", tags=["collaborators"])

MONTH_PATTERN = r"^(0[1-9]|1[0-2])$"


def _period(month: Optional[str], year: Optional[int]):
    default_month, default_year = service.current_period()
    return month or default_month, year or default_year


def _monthly_read(view: MonthlyView) -> CollaboratorMonthlyRead:
    return CollaboratorMonthlyRead(
        id=view.collaborator_id,
        name=view.name,
        daily_rate=view.daily_rate,
        month=view.month,
        year=view.year,
        comment=view.comment,
        projects=[
            MonthlyProjectRead(project_id=p.project_id, name=p.name, days_worked=p.days_worked)
            for p in view.projects
        ],
    )


@router.get("", response_model=List[CollaboratorMonthlyRead])
async def get_collaborators(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    session: AsyncSession = Depends(get_session),
):
    """Every collaborator with the days worked per assigned project for the period (default: current month)."""
    month, year = _period(month, year)
    views = await service.list_monthly_views(session, month, year)
    return [_monthly_read(v) for v in views]


@router.get("/export", response_model=ExportResponse)
async def export_collaborators(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    session: AsyncSession = Depends(get_session),
):
    """Spreadsheet rows of the monthly tracking for every collaborator."""
    month, year = _period(month, year)
    views = await service.list_monthly_views(session, month, year)
    return build_export(views, month, year)


@router.get("/{collaborator_id}", response_model=CollaboratorMonthlyRead)
async def get_collaborator(
    collaborator_id: int,
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    session: AsyncSession = Depends(get_session),
):
    month, year = _period(month, year)
    view = await service.get_monthly_view(session, collaborator_id, month, year)
    return _monthly_read(view)


@router.post("", response_model=CollaboratorRead, status_code=status.HTTP_201_CREATED)
async def add_collaborator(payload: CollaboratorCreate, session: AsyncSession = Depends(get_session)):
    collaborator = await service.create_collaborator(session, payload.name, payload.projects, payload.daily_rate)
    return await service.to_read(session, collaborator)


@router.put("/{collaborator_id}", response_model=CollaboratorRead)
async def put_collaborator(collaborator_id: int, payload: CollaboratorUpdate, session: AsyncSession = Depends(get_session)):
    # an omitted daily_rate leaves the current one untouched
    daily_rate = payload.daily_rate if "daily_rate" in payload.model_fields_set else service.UNSET
    collaborator = await service.update_collaborator(session, collaborator_id, payload.name, payload.projects, daily_rate)
    return await service.to_read(session, collaborator)


@router.delete("/{collaborator_id}")
async def del_collaborator(collaborator_id: int, session: AsyncSession = Depends(get_session)):
    await service.delete_collaborator(session, collaborator_id)
    return {"ok": True}


@router.put("/{collaborator_id}/add-days", response_model=CollaboratorMonthlyRead)
async def add_days_worked(collaborator_id: int, payload: DaysWorkedUpdate, session: AsyncSession = Depends(get_session)):
    """Set the days worked on a project for one month (creates or overwrites)."""
    await service.record_days(session, collaborator_id, payload.project_id, payload.days, payload.month, payload.year)
    view = await service.get_monthly_view(session, collaborator_id, payload.month, payload.year)
    return _monthly_read(view)


@router.put("/{collaborator_id}/comment", response_model=CollaboratorMonthlyRead)
async def update_comment(collaborator_id: int, payload: CommentUpdate, session: AsyncSession = Depends(get_session)):
    await service.upsert_comment(session, collaborator_id, payload.comment, payload.month, payload.year)
    view = await service.get_monthly_view(session, collaborator_id, payload.month, payload.year)
    return _monthly_read(view)
