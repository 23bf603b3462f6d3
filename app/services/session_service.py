import logging
from datetime import datetime
from typing import Optional, Tuple

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.models.workout import Workout, WorkoutStatusEnum
from app.models.workout_session import WorkoutSession, CompletedSet, SessionStatusEnum
from app.schemas.workout import CompletedSetCreate, SessionProgressUpdate
from app.services.workout_service import workout_service

logger = logging.getLogger(__name__)


class SessionService:
    """
    In-progress state of one workout attempt.

    Sessions only move from in-progress to completed. The paused status is
    part of the stored enum but nothing transitions into it. Completing a set
    and moving the exercise/set cursor are separate calls; the client decides
    the pacing.
    """

    async def get_owned(self, db: AsyncSession, session_id: int, user_id: int) -> WorkoutSession:
        result = await db.execute(
            select(WorkoutSession).where(
                WorkoutSession.id == session_id,
                WorkoutSession.user_id == user_id,
            )
        )
        session = result.scalar_one_or_none()
        if session is None:
            raise HTTPException(status_code=404, detail="Session not found")
        return session

    @staticmethod
    def _ensure_in_progress(session: WorkoutSession) -> None:
        if session.status != SessionStatusEnum.in_progress:
            raise HTTPException(status_code=400, detail="Session is not in progress")

    async def find_in_progress(self, db: AsyncSession, workout_id: int, user_id: int) -> Optional[WorkoutSession]:
        result = await db.execute(
            select(WorkoutSession).where(
                WorkoutSession.workout_id == workout_id,
                WorkoutSession.user_id == user_id,
                WorkoutSession.status == SessionStatusEnum.in_progress,
            )
        )
        return result.scalar_one_or_none()

    async def start(self, db: AsyncSession, workout_id: int, user: User) -> Tuple[Workout, WorkoutSession]:
        workout = await workout_service.get_owned(db, workout_id, user.id)
        workout.status = WorkoutStatusEnum.in_progress
        await db.commit()

        session = await self.find_in_progress(db, workout.id, user.id)
        if session is not None:
            return workout, session

        session = WorkoutSession(
            workout_id=workout.id,
            user_id=user.id,
            current_exercise_index=0,
            current_set_index=0,
            status=SessionStatusEnum.in_progress,
            start_time=datetime.utcnow(),
            completed_sets=[],
        )
        try:
            async with db.begin_nested():
                db.add(session)
        except IntegrityError:
            logger.warning("Session for workout %s started concurrently by user %s", workout_id, user.id)
            session = await self.find_in_progress(db, workout_id, user.id)
            if session is None:
                raise
            return workout, session

        await db.commit()
        logger.info("User %s started session %s for workout %s", user.id, session.id, workout.id)
        return workout, session

    async def active(self, db: AsyncSession, user_id: int) -> Tuple[WorkoutSession, Optional[Workout]]:
        result = await db.execute(
            select(WorkoutSession)
            .where(
                WorkoutSession.user_id == user_id,
                WorkoutSession.status == SessionStatusEnum.in_progress,
            )
            .order_by(WorkoutSession.start_time.desc(), WorkoutSession.id.desc())
            .limit(1)
        )
        session = result.scalar_one_or_none()
        if session is None:
            raise HTTPException(status_code=404, detail="No active workout session")

        workout = await db.get(Workout, session.workout_id)
        return session, workout

    async def complete_set(
        self,
        db: AsyncSession,
        session_id: int,
        user_id: int,
        data: CompletedSetCreate,
    ) -> WorkoutSession:
        session = await self.get_owned(db, session_id, user_id)
        self._ensure_in_progress(session)
        session.completed_sets.append(
            CompletedSet(
                exercise_id=data.exercise_id,
                set_number=data.set_number,
                reps=data.reps,
                weight=data.weight,
                rpe=data.rpe,
                completed_at=datetime.utcnow(),
            )
        )
        await db.commit()
        return session

    async def update_progress(
        self,
        db: AsyncSession,
        session_id: int,
        user_id: int,
        data: SessionProgressUpdate,
    ) -> WorkoutSession:
        session = await self.get_owned(db, session_id, user_id)
        self._ensure_in_progress(session)
        if data.current_exercise_index is not None:
            session.current_exercise_index = data.current_exercise_index
        if data.current_set_index is not None:
            session.current_set_index = data.current_set_index
        await db.commit()
        return session

    async def complete(self, db: AsyncSession, session_id: int, user: User) -> WorkoutSession:
        session = await self.get_owned(db, session_id, user.id)
        if session.status == SessionStatusEnum.completed:
            return session
        session.status = SessionStatusEnum.completed
        session.end_time = datetime.utcnow()
        await db.commit()
        logger.info("User %s completed session %s", user.id, session.id)

        workout = await db.get(Workout, session.workout_id)
        if workout is not None:
            await workout_service.complete_workout(db, workout, user)
        return session


session_service = SessionService()
