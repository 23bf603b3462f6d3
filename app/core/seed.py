"""Create the admin account, the default global workout sections and the starter exercise catalogue.

Run with ``python -m app.core.seed``; safe to run repeatedly.
"""
import asyncio
import logging

from sqlalchemy import select

from app.core.config import settings
from app.core.database import init_database
from app.core.db import AsyncSessionLocal
from app.core.initial_exercises import INITIAL_EXERCISES
from app.models.exercise import Exercise
from app.models.section import WorkoutSection
from app.models.user import User, RoleEnum
from app.models.workout import CategoryEnum, DifficultyEnum
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)

DEFAULT_SECTIONS = [
    ("Strength", "#e74c3c"),
    ("Cardio", "#3498db"),
    ("Flexibility", "#2ecc71"),
    ("HIIT", "#f39c12"),
]


async def seed_admin(session) -> User:
    result = await session.execute(select(User).where(User.email == settings.ADMIN_EMAIL))
    admin = result.scalar_one_or_none()
    if admin:
        if admin.role != RoleEnum.admin:
            admin.role = RoleEnum.admin
            logger.info("Promoted existing user %s to admin", admin.email)
        return admin

    admin = User(
        name=settings.ADMIN_NAME,
        email=settings.ADMIN_EMAIL,
        password=auth_service.hash_password(settings.ADMIN_PASSWORD),
        role=RoleEnum.admin,
        is_active=True,
    )
    admin.set_username("admin")
    session.add(admin)
    logger.info("Created admin %s", admin.email)
    return admin


async def seed_sections(session) -> int:
    result = await session.execute(
        select(WorkoutSection.name).where(WorkoutSection.user_id.is_(None))
    )
    existing = {name.lower() for name in result.scalars().all()}

    created = 0
    for name, color in DEFAULT_SECTIONS:
        if name.lower() in existing:
            continue
        session.add(WorkoutSection(name=name, color=color, user_id=None, is_global=True))
        created += 1
    return created


async def seed_exercises(session, admin: User) -> int:
    """Load the starter catalogue as approved global exercises, skipping names already present."""
    await session.flush()

    result = await session.execute(select(WorkoutSection).where(WorkoutSection.user_id.is_(None)))
    sections = {section.name: section for section in result.scalars().all()}

    result = await session.execute(select(Exercise.name).where(Exercise.is_global.is_(True)))
    existing = {name.lower() for name in result.scalars().all()}

    created = 0
    for data in INITIAL_EXERCISES:
        if data["name"].lower() in existing:
            continue
        section = sections.get(data["section"])
        if section is None:
            logger.warning("Section %s missing, skipping exercise %s", data["section"], data["name"])
            continue
        session.add(Exercise(
            name=data["name"],
            description=data["description"],
            section_id=section.id,
            category=CategoryEnum(data["category"]),
            target_muscle=data["target_muscle"],
            secondary_muscles=data.get("secondary_muscles", []),
            equipment=data["equipment"],
            difficulty=DifficultyEnum(data["difficulty"]),
            instructions=data.get("instructions", []),
            pro_tips=data.get("pro_tips", []),
            default_sets=data["default_sets"],
            default_reps=data["default_reps"],
            default_duration=data.get("default_duration", 0),
            created_by_id=admin.id,
            is_global=True,
            approved_by_admin=True,
        ))
        created += 1
    return created


async def seed():
    await init_database()
    async with AsyncSessionLocal() as session:
        admin = await seed_admin(session)
        sections_created = await seed_sections(session)
        exercises_created = await seed_exercises(session, admin)
        await session.commit()
    logger.info(
        "Seeding finished, %s new global sections, %s new exercises", sections_created, exercises_created
    )


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(seed())
