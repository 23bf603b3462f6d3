from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean
from app.core.base import Base
from datetime import datetime

class WorkoutSection(Base):
    __tablename__ = "workout_sections"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    color = Column(String, default="#3498db", nullable=False)
    # NULL owner means a global section
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    is_global = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
