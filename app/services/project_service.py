import logging
from typing import Dict, Iterable, List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import commit_or_fail
from app.core.exceptions import NotFound
from app.models.project import Project

logger = logging.getLogger(__name__)


async def list_projects(session: AsyncSession, q: Optional[str] = None) -> List[Project]:
    stmt = select(Project).order_by(Project.id)
    if q:
        stmt = stmt.where(Project.name.ilike(f"%{q}%"))
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_project(session: AsyncSession, project_id: int) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise NotFound(f"Project {project_id} not found")
    return project


async def create_project(session: AsyncSession, name: str) -> Project:
    project = Project(name=name)
    session.add(project)
    await commit_or_fail(session)
    await session.refresh(project)
    logger.info("Project created", extra={"project_id": project.id})
    return project


async def update_project(session: AsyncSession, project_id: int, name: str) -> Project:
    project = await get_project(session, project_id)
    project.name = name
    session.add(project)
    await commit_or_fail(session)
    await session.refresh(project)
    logger.info("Project renamed", extra={"project_id": project_id})
    return project


async def delete_project(session: AsyncSession, project_id: int) -> None:
    """Delete a project. Assignments and ledger entries pointing at it are kept."""
    project = await get_project(session, project_id)
    await session.delete(project)
    await commit_or_fail(session)
    logger.info("Project deleted", extra={"project_id": project_id})


async def resolve_projects_by_ids(session: AsyncSession, ids: Iterable[int]) -> Dict[int, Project]:
    """Existing subset of ``ids``, keyed by id."""
    wanted = set(ids)
    if not wanted:
        return {}
    result = await session.execute(select(Project).where(Project.id.in_(wanted)))
    return {p.id: p for p in result.scalars().all()}


async def get_project_names(session: AsyncSession, ids: Iterable[int]) -> Dict[int, str]:
    projects = await resolve_projects_by_ids(session, (i for i in ids if i is not None))
    return {pid: p.name for pid, p in projects.items()}
