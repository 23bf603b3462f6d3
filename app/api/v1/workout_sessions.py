from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.workout import (
    ActiveSessionResponse,
    CompletedSetCreate,
    SessionProgressUpdate,
    WorkoutSessionRead,
)
from app.services.session_service import session_service

router = APIRouter(tags=["workout-sessions"])


@router.get("/active", response_model=ActiveSessionResponse)
async def get_active_session(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    session, workout = await session_service.active(db, current_user.id)
    return {"session": session, "workout": workout}


@router.post("/{session_id}/complete-set", response_model=WorkoutSessionRead)
async def complete_set(
    session_id: int,
    data: CompletedSetCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await session_service.complete_set(db, session_id, current_user.id, data)


@router.put("/{session_id}/progress", response_model=WorkoutSessionRead)
async def update_progress(
    session_id: int,
    data: SessionProgressUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await session_service.update_progress(db, session_id, current_user.id, data)


@router.put("/{session_id}/complete", response_model=WorkoutSessionRead)
async def complete_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await session_service.complete(db, session_id, current_user)
