from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.schemas.collaborator import CollaboratorRateRead, DailyRateUpdate
from app.services.collaborator_service import list_rates, set_daily_rate

router = APIRouter(prefix="/tjm", tags=["tjm"])


@router.get("", response_model=List[CollaboratorRateRead])
async def get_rates(session: AsyncSession = Depends(get_session)):
    rows = await list_rates(session)
    return [CollaboratorRateRead(**r) for r in rows]


@router.put("/{collaborator_id}/update-tjm", response_model=CollaboratorRateRead)
async def update_rate(collaborator_id: int, payload: DailyRateUpdate, session: AsyncSession = Depends(get_session)):
    collaborator = await set_daily_rate(session, collaborator_id, payload.daily_rate)
    return CollaboratorRateRead(id=collaborator.id, name=collaborator.name, daily_rate=collaborator.daily_rate)
