import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.rbac import is_admin
from app.models.exercise import Exercise
from app.models.section import WorkoutSection
from app.models.user import User
from app.models.workout import DifficultyEnum
from app.schemas.exercise import ExerciseCreate, ExerciseUpdate

logger = logging.getLogger(__name__)


class ExerciseService:
    async def _get(self, db: AsyncSession, exercise_id: int) -> Exercise:
        exercise = await db.get(Exercise, exercise_id)
        if exercise is None:
            raise HTTPException(status_code=404, detail="Exercise not found")
        return exercise

    async def get_visible(self, db: AsyncSession, exercise_id: int, user: User) -> Exercise:
        exercise = await self._get(db, exercise_id)
        published = exercise.is_global and exercise.approved_by_admin
        if not published and exercise.created_by_id != user.id:
            raise HTTPException(status_code=403, detail="Access denied")
        return exercise

    async def list_visible(
        self,
        db: AsyncSession,
        user_id: int,
        section_id: Optional[int] = None,
        search: Optional[str] = None,
        target_muscle: Optional[str] = None,
        equipment: Optional[str] = None,
        difficulty: Optional[DifficultyEnum] = None,
        only_global: bool = False,
    ) -> List[Exercise]:
        published = and_(Exercise.is_global.is_(True), Exercise.approved_by_admin.is_(True))
        query = select(Exercise)
        if only_global:
            query = query.where(published)
        else:
            query = query.where(or_(Exercise.created_by_id == user_id, published))

        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Exercise.name.ilike(pattern),
                    Exercise.description.ilike(pattern),
                    Exercise.target_muscle.ilike(pattern),
                )
            )
        if section_id is not None:
            query = query.where(Exercise.section_id == section_id)
        if target_muscle:
            query = query.where(Exercise.target_muscle.ilike(f"%{target_muscle}%"))
        if equipment:
            query = query.where(Exercise.equipment.ilike(f"%{equipment}%"))
        if difficulty is not None:
            query = query.where(Exercise.difficulty == difficulty)

        result = await db.execute(query.order_by(Exercise.created_at.desc(), Exercise.id.desc()))
        return list(result.scalars().all())

    async def _check_section(self, db: AsyncSession, section_id: int) -> None:
        if await db.get(WorkoutSection, section_id) is None:
            raise HTTPException(status_code=404, detail="Section not found")

    async def create(self, db: AsyncSession, user: User, data: ExerciseCreate) -> Exercise:
        await self._check_section(db, data.section_id)
        # A user asking for is_global submits for review; admins publish directly
        approved = is_admin(user) and data.is_global

        values = data.model_dump(exclude={"is_global"})
        for field in ("description", "target_muscle", "demo_video", "demo_image"):
            values[field] = values[field] or ""
        values["equipment"] = values["equipment"] or "None"

        exercise = Exercise(
            **values,
            created_by_id=user.id,
            is_global=data.is_global,
            approved_by_admin=approved,
        )
        db.add(exercise)
        await db.commit()
        # populate the section relationship for the response
        await db.refresh(exercise, ["section"])
        logger.info("User %s created exercise %s", user.id, exercise.id)
        return exercise

    def _check_can_modify(self, exercise: Exercise, user: User) -> None:
        if exercise.created_by_id != user.id and not is_admin(user):
            raise HTTPException(status_code=403, detail="Access denied")

    async def update(self, db: AsyncSession, exercise_id: int, user: User, data: ExerciseUpdate) -> Exercise:
        exercise = await self._get(db, exercise_id)
        self._check_can_modify(exercise, user)

        changes = data.model_dump(exclude_unset=True)
        is_global = changes.pop("is_global", None)
        if is_global is not None:
            exercise.is_global = is_global
            exercise.approved_by_admin = is_global and is_admin(user)

        if changes.get("section_id") is not None:
            await self._check_section(db, changes["section_id"])

        for field, value in changes.items():
            if value is None:
                continue
            setattr(exercise, field, value)
        await db.commit()
        await db.refresh(exercise, ["section"])
        return exercise

    async def delete(self, db: AsyncSession, exercise_id: int, user: User) -> None:
        exercise = await self._get(db, exercise_id)
        self._check_can_modify(exercise, user)
        await db.delete(exercise)
        await db.commit()
        logger.info("User %s removed exercise %s", user.id, exercise_id)


exercise_service = ExerciseService()
