import enum
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Float, Enum, Index, text
from sqlalchemy.orm import relationship
from app.core.base import Base
from datetime import datetime

class SessionStatusEnum(str, enum.Enum):
    in_progress = "in-progress"
    completed = "completed"
    # No transition leads here yet
    paused = "paused"

class WorkoutSession(Base):
    __tablename__ = "workout_sessions"

    id = Column(Integer, primary_key=True)
    workout_id = Column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    current_exercise_index = Column(Integer, default=0, nullable=False)
    current_set_index = Column(Integer, default=0, nullable=False)
    status = Column(Enum(SessionStatusEnum), default=SessionStatusEnum.in_progress, nullable=False)
    start_time = Column(DateTime, default=datetime.utcnow, nullable=False)
    end_time = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    completed_sets = relationship(
        "CompletedSet",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="CompletedSet.id",
        lazy="selectin",
    )

    __table_args__ = (
        # One in-progress session per (workout, user); Enum stores member names
        Index(
            "uq_active_session",
            "workout_id",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'in_progress'"),
            sqlite_where=text("status = 'in_progress'"),
        ),
    )

class CompletedSet(Base):
    __tablename__ = "completed_sets"

    id = Column(Integer, primary_key=True)
    session_id = Column(Integer, ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=True)
    set_number = Column(Integer, nullable=True)
    reps = Column(Integer, nullable=True)
    weight = Column(Float, nullable=True)
    rpe = Column(Integer, nullable=True)
    completed_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    session = relationship("WorkoutSession", back_populates="completed_sets")
