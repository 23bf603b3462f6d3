from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.models.workout import DifficultyEnum
from app.schemas.exercise import ExerciseCreate, ExerciseUpdate, ExerciseRead
from app.services.exercise_service import exercise_service

router = APIRouter(tags=["exercises"])


@router.post("", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED)
async def create_exercise(
    data: ExerciseCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await exercise_service.create(db, current_user, data)


@router.get("", response_model=List[ExerciseRead])
async def list_exercises(
    section: Optional[int] = Query(None, description="Section id"),
    search: Optional[str] = None,
    target_muscle: Optional[str] = None,
    equipment: Optional[str] = None,
    difficulty: Optional[DifficultyEnum] = None,
    is_global: bool = Query(False, description="Only approved global exercises"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await exercise_service.list_visible(
        db,
        current_user.id,
        section_id=section,
        search=search,
        target_muscle=target_muscle,
        equipment=equipment,
        difficulty=difficulty,
        only_global=is_global,
    )


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(
    exercise_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await exercise_service.get_visible(db, exercise_id, current_user)


@router.put("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(
    exercise_id: int,
    data: ExerciseUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await exercise_service.update(db, exercise_id, current_user, data)


@router.delete("/{exercise_id}")
async def delete_exercise(
    exercise_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await exercise_service.delete(db, exercise_id, current_user)
    return {"message": "Exercise removed"}
