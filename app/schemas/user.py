from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.user import RoleEnum, ThemeEnum

class UserPreview(BaseModel):
    id: int
    name: str
    username: Optional[str] = None
    phone: Optional[str] = None
    profile_photo: Optional[str] = None
    role: RoleEnum = RoleEnum.user

    class Config:
        from_attributes = True

class UserRead(BaseModel):
    id: int
    name: str
    email: str
    username: Optional[str] = None
    phone: Optional[str] = None
    profile_photo: Optional[str] = None
    role: RoleEnum
    is_active: bool = True
    height: Optional[float] = None
    weight: Optional[float] = None
    goals: Optional[str] = None
    theme_preference: Optional[ThemeEnum] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserStats(BaseModel):
    total_workouts: int = 0
    avg_calories: float = 0
    last_workout_date: Optional[datetime] = None

class ProfileResponse(UserRead):
    stats: UserStats

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    goals: Optional[str] = None
    username: Optional[str] = None
    phone: Optional[str] = None
    profile_photo: Optional[str] = None
    theme_preference: Optional[ThemeEnum] = None

class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6)
