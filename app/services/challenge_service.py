import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.rbac import is_admin
from app.models.challenge import Challenge, ChallengeParticipant
from app.models.user import User
from app.models.workout import DifficultyEnum
from app.schemas.social import ChallengeCreate

logger = logging.getLogger(__name__)


class ChallengeService:
    async def get(self, db: AsyncSession, challenge_id: int) -> Challenge:
        challenge = await db.get(Challenge, challenge_id)
        if challenge is None:
            raise HTTPException(status_code=404, detail="Challenge not found")
        return challenge

    async def list_latest(self, db: AsyncSession, limit: int = 10) -> List[Challenge]:
        result = await db.execute(
            select(Challenge).order_by(Challenge.created_at.desc(), Challenge.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, creator: User, data: ChallengeCreate) -> Challenge:
        if not is_admin(creator):
            raise HTTPException(status_code=403, detail="Only admins can create challenges")

        title = (data.title or "").strip()
        if not title:
            raise HTTPException(status_code=400, detail="Title is required")

        challenge = Challenge(
            title=title,
            description=data.description,
            created_by_id=creator.id,
            difficulty=data.difficulty or DifficultyEnum.beginner,
            deadline=data.deadline,
            reward=data.reward,
            participants=[],
        )
        db.add(challenge)
        await db.commit()
        logger.info("Admin %s created challenge %s", creator.id, challenge.id)
        return challenge

    async def participate(self, db: AsyncSession, challenge_id: int, user: User) -> Challenge:
        """
        Mark the user's participation as complete.

        The first completion time is kept on repeated calls so the leaderboard
        order cannot be gamed by participating again.
        """
        challenge = await self.get(db, challenge_id)
        participant = next((p for p in challenge.participants if p.user_id == user.id), None)

        if participant is None:
            participant = ChallengeParticipant(
                user_id=user.id,
                progress=100,
                completed=True,
                completed_at=datetime.utcnow(),
            )
            participant.user = user
            try:
                async with db.begin_nested():
                    challenge.participants.append(participant)
            except IntegrityError:
                logger.warning("User %s joined challenge %s concurrently", user.id, challenge_id)
                await db.refresh(challenge)
                participant = next(p for p in challenge.participants if p.user_id == user.id)
            else:
                logger.info("User %s completed challenge %s", user.id, challenge.id)

        participant.progress = 100
        participant.completed = True
        if participant.completed_at is None:
            participant.completed_at = datetime.utcnow()
        await db.commit()
        return challenge

    async def leaderboard(self, db: AsyncSession, challenge_id: int) -> dict:
        challenge = await self.get(db, challenge_id)
        finished = sorted(
            (p for p in challenge.participants if p.completed and p.completed_at is not None),
            key=lambda p: p.completed_at,
        )
        return {
            "challenge": {"id": challenge.id, "title": challenge.title},
            "leaderboard": [
                {"rank": index + 1, "user": p.user, "completed_at": p.completed_at}
                for index, p in enumerate(finished)
            ],
        }


challenge_service = ChallengeService()
