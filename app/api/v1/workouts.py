from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.models.workout import WorkoutStatusEnum, CategoryEnum
from app.schemas.workout import (
    WorkoutCreate,
    WorkoutUpdate,
    WorkoutResponse,
    WorkoutStartResponse,
)
from app.services.session_service import session_service
from app.services.workout_service import workout_service

router = APIRouter(tags=["workouts"])


@router.post("", response_model=WorkoutResponse, status_code=status.HTTP_201_CREATED)
async def create_workout(
    data: WorkoutCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await workout_service.create(db, current_user, data)


@router.get("", response_model=List[WorkoutResponse])
async def list_workouts(
    workout_status: Optional[WorkoutStatusEnum] = Query(None, alias="status"),
    category: Optional[CategoryEnum] = None,
    is_template: Optional[bool] = None,
    day: Optional[date] = Query(None, alias="date", description="Only workouts scheduled on this day"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await workout_service.list_workouts(
        db, current_user.id, status=workout_status, category=category, is_template=is_template, day=day
    )


@router.get("/today", response_model=List[WorkoutResponse])
async def todays_workouts(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await workout_service.list_today(db, current_user.id)


@router.get("/{workout_id}", response_model=WorkoutResponse)
async def get_workout(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await workout_service.get_owned(db, workout_id, current_user.id)


@router.put("/{workout_id}", response_model=WorkoutResponse)
async def update_workout(
    workout_id: int,
    data: WorkoutUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await workout_service.update(db, workout_id, current_user, data)


@router.delete("/{workout_id}")
async def delete_workout(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await workout_service.delete(db, workout_id, current_user.id)
    return {"message": "Workout removed"}


@router.put("/{workout_id}/complete", response_model=WorkoutResponse)
async def complete_workout(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    workout = await workout_service.get_owned(db, workout_id, current_user.id)
    await workout_service.complete_workout(db, workout, current_user)
    return workout


@router.post("/{workout_id}/start", response_model=WorkoutStartResponse)
async def start_workout(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    workout, session = await session_service.start(db, workout_id, current_user)
    return {"workout": workout, "session": session}
