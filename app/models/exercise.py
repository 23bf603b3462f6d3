from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, Enum, JSON
from sqlalchemy.orm import relationship
from app.core.base import Base
from app.models.workout import CategoryEnum, DifficultyEnum
from datetime import datetime

class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, index=True)
    description = Column(String, default="", nullable=False)
    section_id = Column(Integer, ForeignKey("workout_sections.id"), nullable=False, index=True)
    category = Column(Enum(CategoryEnum), default=CategoryEnum.strength, nullable=False)
    target_muscle = Column(String, default="", nullable=False)
    secondary_muscles = Column(JSON, default=list)
    equipment = Column(String, default="None", nullable=False)
    difficulty = Column(Enum(DifficultyEnum), default=DifficultyEnum.beginner, nullable=False)
    instructions = Column(JSON, default=list)
    pro_tips = Column(JSON, default=list)
    default_sets = Column(Integer, default=3, nullable=False)
    default_reps = Column(Integer, default=10, nullable=False)
    default_duration = Column(Integer, default=0, nullable=False)
    demo_video = Column(String, default="", nullable=False)
    demo_image = Column(String, default="", nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_global = Column(Boolean, default=False, nullable=False)
    approved_by_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    section = relationship("WorkoutSection", lazy="selectin")
