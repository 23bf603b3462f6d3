import logging
from datetime import datetime, date, time, timedelta
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select, update, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from app.core.rbac import is_admin
from app.models.exercise import Exercise
from app.models.section import WorkoutSection
from app.models.user import User
from app.models.workout import Workout, WorkoutExercise, WorkoutStatusEnum, CategoryEnum
from app.schemas.workout import WorkoutCreate, WorkoutUpdate, WorkoutExerciseInput

logger = logging.getLogger(__name__)


def day_bounds(day: date):
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class WorkoutService:
    async def get_owned(self, db: AsyncSession, workout_id: int, user_id: int) -> Workout:
        result = await db.execute(
            select(Workout).where(Workout.id == workout_id, Workout.user_id == user_id)
        )
        workout = result.scalar_one_or_none()
        if workout is None:
            raise HTTPException(status_code=404, detail="Workout not found")
        return workout

    async def list_workouts(
        self,
        db: AsyncSession,
        user_id: int,
        status: Optional[WorkoutStatusEnum] = None,
        category: Optional[CategoryEnum] = None,
        is_template: Optional[bool] = None,
        day: Optional[date] = None,
    ) -> List[Workout]:
        query = select(Workout).where(Workout.user_id == user_id)
        if status is not None:
            query = query.where(Workout.status == status)
        if category is not None:
            query = query.where(Workout.category == category)
        if is_template is not None:
            query = query.where(Workout.is_template.is_(is_template))
        if day is not None:
            start, end = day_bounds(day)
            query = query.where(Workout.date >= start, Workout.date < end)

        result = await db.execute(query.order_by(Workout.date.desc(), Workout.id.desc()))
        return list(result.scalars().all())

    async def list_today(self, db: AsyncSession, user_id: int) -> List[Workout]:
        start, end = day_bounds(datetime.utcnow().date())
        result = await db.execute(
            select(Workout)
            .where(Workout.user_id == user_id, Workout.date >= start, Workout.date < end)
            .order_by(Workout.created_at.desc(), Workout.id.desc())
        )
        return list(result.scalars().all())

    async def _resolve_sections(self, db: AsyncSession, section_ids: List[int], user_id: int) -> List[WorkoutSection]:
        if not section_ids:
            return []
        result = await db.execute(
            select(WorkoutSection).where(
                WorkoutSection.id.in_(section_ids),
                or_(WorkoutSection.user_id == user_id, WorkoutSection.is_global.is_(True)),
            )
        )
        sections = list(result.scalars().all())
        if len(sections) != len(set(section_ids)):
            raise HTTPException(status_code=404, detail="Section not found")
        return sections

    async def _build_exercises(self, db: AsyncSession, items: List[WorkoutExerciseInput]) -> List[WorkoutExercise]:
        if not items:
            return []
        exercise_ids = {item.exercise_id for item in items}
        result = await db.execute(select(Exercise.id).where(Exercise.id.in_(exercise_ids)))
        if len(result.all()) != len(exercise_ids):
            raise HTTPException(status_code=404, detail="Exercise not found")
        return [WorkoutExercise(**item.model_dump()) for item in items]

    async def create(self, db: AsyncSession, user: User, data: WorkoutCreate) -> Workout:
        # A user asking for is_global submits for review; admins publish directly
        approved = is_admin(user) and data.is_global
        completed = data.status == WorkoutStatusEnum.completed

        workout = Workout(
            user_id=user.id,
            title=data.title.strip(),
            description=data.description or "",
            category=data.category,
            sections=await self._resolve_sections(db, data.section_ids, user.id),
            exercises=await self._build_exercises(db, data.exercises),
            estimated_duration=data.estimated_duration,
            difficulty=data.difficulty,
            notes=data.notes or "",
            calories=data.calories,
            date=data.date or datetime.utcnow(),
            status=WorkoutStatusEnum.scheduled if completed else data.status,
            is_template=data.is_template,
            is_global=data.is_global,
            approved_by_admin=approved,
        )
        db.add(workout)
        await db.commit()
        logger.info("User %s created workout %s", user.id, workout.id)
        if completed:
            await self.complete_workout(db, workout, user)
        return workout

    async def update(self, db: AsyncSession, workout_id: int, user: User, data: WorkoutUpdate) -> Workout:
        workout = await self.get_owned(db, workout_id, user.id)
        changes = data.model_dump(exclude_unset=True)

        section_ids = changes.pop("section_ids", None)
        if section_ids is not None:
            workout.sections = await self._resolve_sections(db, section_ids, user.id)

        exercises = changes.pop("exercises", None)
        if exercises is not None:
            workout.exercises = await self._build_exercises(db, data.exercises)

        is_global = changes.pop("is_global", None)
        if is_global is not None:
            workout.is_global = is_global
            workout.approved_by_admin = is_global and is_admin(user)

        if changes.get("status") == WorkoutStatusEnum.completed:
            # Completion goes through complete_workout so stats stay consistent
            changes.pop("status")
            self._apply(workout, changes)
            await db.commit()
            await self.complete_workout(db, workout, user)
            return workout

        self._apply(workout, changes)
        await db.commit()
        return workout

    def _apply(self, workout: Workout, changes: dict) -> None:
        for field, value in changes.items():
            if value is None:
                continue
            setattr(workout, field, value)

    async def delete(self, db: AsyncSession, workout_id: int, user_id: int) -> None:
        workout = await self.get_owned(db, workout_id, user_id)
        await db.delete(workout)
        await db.commit()
        logger.info("User %s removed workout %s", user_id, workout_id)

    async def complete_workout(self, db: AsyncSession, workout: Workout, user: User) -> bool:
        """
        Move a workout to completed and fold it into the owner's stats.

        This is the only path that marks workouts completed. The status flip is
        a conditional UPDATE, so a workout that is already completed (or gets
        completed by a concurrent request) leaves the stats alone and False is
        returned. The stats themselves are recomputed by a single UPDATE.
        """
        now = datetime.utcnow()
        flipped = await db.execute(
            update(Workout)
            .where(Workout.id == workout.id, Workout.status != WorkoutStatusEnum.completed)
            .values(status=WorkoutStatusEnum.completed, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        set_committed_value(workout, "status", WorkoutStatusEnum.completed)
        set_committed_value(workout, "updated_at", now)
        if flipped.rowcount == 0:
            await db.commit()
            return False

        avg_calories = (
            select(func.round(func.avg(Workout.calories)))
            .where(
                Workout.user_id == workout.user_id,
                Workout.status == WorkoutStatusEnum.completed,
                Workout.calories > 0,
            )
            .scalar_subquery()
        )
        await db.execute(
            update(User)
            .where(User.id == workout.user_id)
            .values(
                total_workouts=User.total_workouts + 1,
                avg_calories=func.coalesce(avg_calories, User.avg_calories),
                last_workout_date=now,
            )
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        await db.refresh(user)
        logger.info(
            "Workout %s completed by user %s (total_workouts=%s)",
            workout.id, workout.user_id, user.total_workouts,
        )
        return True


workout_service = WorkoutService()
