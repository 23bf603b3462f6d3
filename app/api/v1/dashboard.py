from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from datetime import datetime, timedelta
import logging

from app.core.db import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.models.workout import Workout, WorkoutStatusEnum
from app.services.workout_service import day_bounds

router = APIRouter(tags=["dashboard"])
logger = logging.getLogger(__name__)


async def completed_totals(db: AsyncSession, user_id: int, start: datetime, end: datetime):
    """Calories and count of completed workouts dated in [start, end)."""
    result = await db.execute(
        select(func.coalesce(func.sum(Workout.calories), 0), func.count(Workout.id)).where(
            Workout.user_id == user_id,
            Workout.status == WorkoutStatusEnum.completed,
            Workout.date >= start,
            Workout.date < end,
        )
    )
    calories, count = result.one()
    return float(calories or 0), int(count or 0)


@router.get("")
async def get_dashboard_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    today = datetime.utcnow().date()
    today_start, today_end = day_bounds(today)
    # ISO week, Monday first
    week_start, _ = day_bounds(today - timedelta(days=today.weekday()))
    week_end = week_start + timedelta(days=7)

    today_calories, today_count = await completed_totals(db, current_user.id, today_start, today_end)
    week_calories, week_count = await completed_totals(db, current_user.id, week_start, week_end)

    return {
        "calories": {"today": today_calories, "week": week_calories},
        "workouts": {"today": today_count, "week": week_count},
    }


@router.get("/calories-chart")
async def get_calories_chart(
    days: int = Query(7, ge=1, le=365),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    start_date = datetime.utcnow() - timedelta(days=days)
    result = await db.execute(
        select(Workout.date, Workout.calories)
        .where(
            Workout.user_id == current_user.id,
            Workout.status == WorkoutStatusEnum.completed,
            Workout.date >= start_date,
            Workout.calories > 0,
        )
        .order_by(Workout.date.asc())
    )

    calories_by_date = {}
    for workout_date, calories in result.all():
        key = workout_date.date().isoformat()
        calories_by_date[key] = calories_by_date.get(key, 0) + calories

    return [{"date": key, "calories": value} for key, value in calories_by_date.items()]
