import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, Float, Enum, Table
from sqlalchemy.orm import relationship
from app.core.base import Base
from datetime import datetime

class CategoryEnum(str, enum.Enum):
    strength = "Strength"
    cardio = "Cardio"
    flexibility = "Flexibility"
    mixed = "Mixed"

class DifficultyEnum(str, enum.Enum):
    beginner = "Beginner"
    intermediate = "Intermediate"
    advanced = "Advanced"

class WorkoutStatusEnum(str, enum.Enum):
    scheduled = "scheduled"
    in_progress = "in-progress"
    completed = "completed"

workout_section_links = Table(
    "workout_section_links",
    Base.metadata,
    Column("workout_id", Integer, ForeignKey("workouts.id", ondelete="CASCADE"), primary_key=True),
    Column("section_id", Integer, ForeignKey("workout_sections.id"), primary_key=True),
)

class Workout(Base):
    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, default="", nullable=False)
    category = Column(Enum(CategoryEnum), default=CategoryEnum.mixed, nullable=False)
    estimated_duration = Column(Integer, default=0, nullable=False)
    difficulty = Column(Enum(DifficultyEnum), default=DifficultyEnum.beginner, nullable=False)
    notes = Column(String, default="", nullable=False)
    calories = Column(Float, default=0, nullable=False)
    date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    status = Column(Enum(WorkoutStatusEnum), default=WorkoutStatusEnum.scheduled, nullable=False)
    is_template = Column(Boolean, default=False, nullable=False)
    is_global = Column(Boolean, default=False, nullable=False)
    approved_by_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    exercises = relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.order",
        lazy="selectin",
    )
    sections = relationship("WorkoutSection", secondary=workout_section_links, lazy="selectin")

class WorkoutExercise(Base):
    __tablename__ = "workout_exercises"

    id = Column(Integer, primary_key=True)
    workout_id = Column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=False)
    sets = Column(Integer, default=3, nullable=False)
    reps = Column(Integer, default=10, nullable=False)
    weight = Column(Float, default=0, nullable=False)
    rpe = Column(Integer, default=7, nullable=False)
    rest_time = Column(Integer, default=90, nullable=False)  # seconds
    order = Column(Integer, default=0, nullable=False)

    workout = relationship("Workout", back_populates="exercises")
