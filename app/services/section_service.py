import logging
from datetime import datetime, timedelta
from typing import List

from fastapi import HTTPException
from sqlalchemy import select, func, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.rbac import is_admin
from app.models.section import WorkoutSection
from app.models.user import User
from app.models.workout import Workout, WorkoutStatusEnum, workout_section_links
from app.schemas.section import SectionCreate, SectionUpdate, SectionStat

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#3498db"


def visible_to(user_id: int):
    return or_(WorkoutSection.user_id == user_id, WorkoutSection.is_global.is_(True))


class SectionService:
    async def list_visible(self, db: AsyncSession, user_id: int) -> List[WorkoutSection]:
        result = await db.execute(
            select(WorkoutSection).where(visible_to(user_id)).order_by(WorkoutSection.name)
        )
        return list(result.scalars().all())

    async def get_visible(self, db: AsyncSession, section_id: int, user_id: int) -> WorkoutSection:
        result = await db.execute(
            select(WorkoutSection).where(WorkoutSection.id == section_id, visible_to(user_id))
        )
        section = result.scalar_one_or_none()
        if section is None:
            raise HTTPException(status_code=404, detail="Section not found")
        return section

    async def _name_taken(self, db: AsyncSession, name: str, user_id: int) -> bool:
        result = await db.execute(
            select(WorkoutSection.id).where(
                func.lower(WorkoutSection.name) == name.lower(),
                or_(
                    WorkoutSection.user_id == user_id,
                    and_(WorkoutSection.user_id.is_(None), WorkoutSection.is_global.is_(True)),
                ),
            )
        )
        return result.first() is not None

    async def create(self, db: AsyncSession, user: User, data: SectionCreate) -> WorkoutSection:
        name = data.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Section name is required")
        if await self._name_taken(db, name, user.id):
            raise HTTPException(status_code=400, detail="Section with this name already exists")

        make_global = is_admin(user) and data.is_global
        section = WorkoutSection(
            name=name,
            color=data.color or DEFAULT_COLOR,
            user_id=None if make_global else user.id,
            is_global=make_global,
        )
        db.add(section)
        await db.commit()
        logger.info("User %s created section %s (global=%s)", user.id, section.id, make_global)
        return section

    def _check_can_modify(self, section: WorkoutSection, user: User) -> None:
        if section.user_id is None:
            if not is_admin(user):
                raise HTTPException(status_code=403, detail="Access denied")
        elif section.user_id != user.id and not is_admin(user):
            raise HTTPException(status_code=403, detail="Access denied")

    async def update(self, db: AsyncSession, section_id: int, user: User, data: SectionUpdate) -> WorkoutSection:
        section = await self.get_visible(db, section_id, user.id)
        self._check_can_modify(section, user)

        if data.name and data.name.strip():
            section.name = data.name.strip()
        if data.color:
            section.color = data.color
        await db.commit()
        return section

    async def delete(self, db: AsyncSession, section_id: int, user: User) -> None:
        section = await self.get_visible(db, section_id, user.id)
        self._check_can_modify(section, user)

        in_use = await db.execute(
            select(workout_section_links.c.workout_id)
            .where(workout_section_links.c.section_id == section.id)
            .limit(1)
        )
        if in_use.first() is not None:
            raise HTTPException(status_code=400, detail="Cannot delete section that is used in workouts")

        await db.delete(section)
        await db.commit()
        logger.info("User %s removed section %s", user.id, section_id)

    async def stats(self, db: AsyncSession, user_id: int, days: int = 30) -> List[SectionStat]:
        """Completed workouts per section in the window; sections without any are left out."""
        since = datetime.utcnow() - timedelta(days=days)
        result = await db.execute(
            select(
                WorkoutSection.id,
                WorkoutSection.name,
                WorkoutSection.color,
                func.count(Workout.id),
            )
            .join(workout_section_links, workout_section_links.c.section_id == WorkoutSection.id)
            .join(Workout, Workout.id == workout_section_links.c.workout_id)
            .where(
                visible_to(user_id),
                Workout.user_id == user_id,
                Workout.status == WorkoutStatusEnum.completed,
                Workout.date >= since,
            )
            .group_by(WorkoutSection.id, WorkoutSection.name, WorkoutSection.color)
            .order_by(WorkoutSection.name)
        )
        return [
            SectionStat(id=row[0], name=row[1], color=row[2], count=row[3])
            for row in result.all()
        ]


section_service = SectionService()
