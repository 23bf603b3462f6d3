import enum
from sqlalchemy import Column, Integer, String, Float, Enum, Boolean, DateTime
from app.core.base import Base
from datetime import datetime

class RoleEnum(str, enum.Enum):
    user = "user"
    admin = "admin"

class ThemeEnum(str, enum.Enum):
    light = "light"
    dark = "dark"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)
    username = Column(String, nullable=True)
    # Lowercased copy of username; NULLs do not collide
    username_lower = Column(String, unique=True, nullable=True)
    phone = Column(String, default="", nullable=False)
    profile_photo = Column(String, default="", nullable=False)
    role = Column(Enum(RoleEnum), default=RoleEnum.user, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    height = Column(Float, nullable=True)
    weight = Column(Float, nullable=True)
    goals = Column(String, default="", nullable=False)
    theme_preference = Column(Enum(ThemeEnum), default=ThemeEnum.light, nullable=False)

    # Aggregate stats, maintained by the workout completion transition
    total_workouts = Column(Integer, default=0, nullable=False)
    avg_calories = Column(Float, default=0, nullable=False)
    last_workout_date = Column(DateTime, nullable=True)

    refresh_token = Column(String, nullable=True, index=True)
    refresh_token_expires = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def set_username(self, username):
        if not username:
            self.username = None
            self.username_lower = None
            return
        self.username = username.strip()
        self.username_lower = self.username.lower()
