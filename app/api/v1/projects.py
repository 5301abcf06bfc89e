from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.schemas.project import ProjectCreate, ProjectRead
from app.schemas.recap import RecapResponse
from app.services.collaborator_service import current_period
from app.services.project_service import create_project, delete_project, list_projects, update_project
from app.services.recap_service import compute_recap

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=List[ProjectRead])
async def get_projects(q: Optional[str] = None, session: AsyncSession = Depends(get_session)):
    projects = await list_projects(session, q=q)
    return [ProjectRead(**p.model_dump()) for p in projects]


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def add_project(payload: ProjectCreate, session: AsyncSession = Depends(get_session)):
    project = await create_project(session, payload.name)
    return ProjectRead(**project.model_dump())


@router.get("/recap", response_model=RecapResponse)
async def get_recap(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[str] = Query(None, pattern=r"^(0[1-9]|1[0-2])$"),
    session: AsyncSession = Depends(get_session),
):
    """
    Month-by-month cost of every project for a year (default: current year).

    Cost is days worked x the collaborator's daily rate; a collaborator without
    a rate contributes 0. Projects deleted since are reported with a null name.
    """
    if year is None:
        _, year = current_period()
    return await compute_recap(session, year, month)


@router.put("/{project_id}", response_model=ProjectRead)
async def put_project(project_id: int, payload: ProjectCreate, session: AsyncSession = Depends(get_session)):
    project = await update_project(session, project_id, payload.name)
    return ProjectRead(**project.model_dump())


@router.delete("/{project_id}")
async def del_project(project_id: int, session: AsyncSession = Depends(get_session)):
    await delete_project(session, project_id)
    return {"ok": True}
