from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.models.user import RoleEnum


class UserAdminRead(BaseModel):
    id: int
    name: str
    email: str
    username: Optional[str] = None
    role: RoleEnum
    is_active: bool
    total_workouts: int = 0
    last_workout_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RoleUpdateRequest(BaseModel):
    role: str  # "user" or "admin"


class RoleUpdateResponse(BaseModel):
    message: str
    user_id: int
    new_role: str
