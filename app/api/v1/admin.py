from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc
import logging

from app.core.db import get_db
from app.core.rbac import require_admin
from app.models.exercise import Exercise
from app.models.user import User, RoleEnum
from app.models.workout import Workout
from app.schemas.admin import UserAdminRead, RoleUpdateRequest, RoleUpdateResponse
from app.schemas.exercise import ExerciseRead
from app.schemas.workout import WorkoutResponse
from typing import List, Optional
import math

router = APIRouter(tags=["admin"])
logger = logging.getLogger(__name__)


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# ---------- users ----------

@router.get("/users")
async def list_users(
    search: Optional[str] = Query(None, description="Search by name, email or username"),
    role: Optional[str] = Query(None, description="Filter by role: user|admin"),
    is_active: Optional[bool] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    query = select(User)

    if search:
        pattern = f"%{search}%"
        query = query.where(
            User.email.ilike(pattern) | User.name.ilike(pattern) | User.username.ilike(pattern)
        )
    if role:
        try:
            query = query.where(User.role == RoleEnum(role))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid role: {role}")
    if is_active is not None:
        query = query.where(User.is_active.is_(is_active))

    count_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = count_result.scalar_one()

    query = query.order_by(desc(User.created_at), desc(User.id))
    query = query.offset((page - 1) * page_size).limit(page_size)

    result = await db.execute(query)
    users = result.scalars().all()

    return {
        "items": [UserAdminRead.model_validate(u) for u in users],
        "total": total,
        "page": page,
        "page_size": page_size,
        "pages": math.ceil(total / page_size) if total > 0 else 1,
    }


@router.get("/users/{user_id}", response_model=UserAdminRead)
async def get_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await get_user_or_404(db, user_id)


@router.put("/users/{user_id}/role", response_model=RoleUpdateResponse)
async def update_user_role(
    user_id: int,
    role_data: RoleUpdateRequest,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot change your own role")

    try:
        new_role = RoleEnum(role_data.role)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid role: {role_data.role}. Allowed: user, admin",
        )

    user = await get_user_or_404(db, user_id)
    user.role = new_role
    await db.commit()
    logger.info("Admin %s set role of user %s to %s", current_user.id, user.id, new_role.value)

    return RoleUpdateResponse(
        message=f"Role of {user.email} changed to {new_role.value}",
        user_id=user.id,
        new_role=new_role.value,
    )


@router.put("/users/{user_id}/deactivate", response_model=UserAdminRead)
async def deactivate_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Users are never deleted; a deactivated account can no longer sign in."""
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot deactivate your own account")

    user = await get_user_or_404(db, user_id)
    user.is_active = False
    user.refresh_token = None
    user.refresh_token_expires = None
    await db.commit()
    logger.info("Admin %s deactivated user %s", current_user.id, user.id)
    return user


# ---------- content moderation ----------

@router.get("/workouts/pending", response_model=List[WorkoutResponse])
async def pending_workouts(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Workout)
        .where(Workout.is_global.is_(True), Workout.approved_by_admin.is_(False))
        .order_by(desc(Workout.created_at), desc(Workout.id))
    )
    return result.scalars().all()


async def get_workout_or_404(db: AsyncSession, workout_id: int) -> Workout:
    workout = await db.get(Workout, workout_id)
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


@router.put("/workouts/{workout_id}/approve", response_model=WorkoutResponse)
async def approve_workout(
    workout_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    workout = await get_workout_or_404(db, workout_id)
    workout.approved_by_admin = True
    await db.commit()
    logger.info("Admin %s approved workout %s", current_user.id, workout.id)
    return workout


@router.put("/workouts/{workout_id}/reject")
async def reject_workout(
    workout_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    workout = await get_workout_or_404(db, workout_id)
    workout.is_global = False
    workout.approved_by_admin = False
    await db.commit()
    logger.info("Admin %s rejected workout %s", current_user.id, workout.id)
    return {"message": "Workout rejected"}


@router.get("/exercises/pending", response_model=List[ExerciseRead])
async def pending_exercises(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Exercise)
        .where(Exercise.is_global.is_(True), Exercise.approved_by_admin.is_(False))
        .order_by(desc(Exercise.created_at), desc(Exercise.id))
    )
    return result.scalars().all()


async def get_exercise_or_404(db: AsyncSession, exercise_id: int) -> Exercise:
    exercise = await db.get(Exercise, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


@router.put("/exercises/{exercise_id}/approve", response_model=ExerciseRead)
async def approve_exercise(
    exercise_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    exercise = await get_exercise_or_404(db, exercise_id)
    exercise.approved_by_admin = True
    await db.commit()
    logger.info("Admin %s approved exercise %s", current_user.id, exercise.id)
    return exercise


@router.put("/exercises/{exercise_id}/reject")
async def reject_exercise(
    exercise_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    exercise = await get_exercise_or_404(db, exercise_id)
    exercise.is_global = False
    exercise.approved_by_admin = False
    await db.commit()
    logger.info("Admin %s rejected exercise %s", current_user.id, exercise.id)
    return {"message": "Exercise rejected"}
