from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.models.workout import CategoryEnum, DifficultyEnum
from app.schemas.section import SectionRead

class ExerciseCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    section_id: int
    category: CategoryEnum = CategoryEnum.strength
    target_muscle: Optional[str] = None
    secondary_muscles: List[str] = []
    equipment: Optional[str] = None
    difficulty: DifficultyEnum = DifficultyEnum.beginner
    instructions: List[str] = []
    pro_tips: List[str] = []
    default_sets: int = Field(default=3, ge=1)
    default_reps: int = Field(default=10, ge=0)
    default_duration: int = Field(default=0, ge=0)
    demo_video: Optional[str] = None
    demo_image: Optional[str] = None
    is_global: bool = False

class ExerciseUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    section_id: Optional[int] = None
    category: Optional[CategoryEnum] = None
    target_muscle: Optional[str] = None
    secondary_muscles: Optional[List[str]] = None
    equipment: Optional[str] = None
    difficulty: Optional[DifficultyEnum] = None
    instructions: Optional[List[str]] = None
    pro_tips: Optional[List[str]] = None
    default_sets: Optional[int] = Field(default=None, ge=1)
    default_reps: Optional[int] = Field(default=None, ge=0)
    default_duration: Optional[int] = Field(default=None, ge=0)
    demo_video: Optional[str] = None
    demo_image: Optional[str] = None
    is_global: Optional[bool] = None

class ExerciseRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    section_id: int
    section: Optional[SectionRead] = None
    category: CategoryEnum
    target_muscle: Optional[str] = None
    secondary_muscles: List[str] = []
    equipment: Optional[str] = None
    difficulty: DifficultyEnum
    instructions: List[str] = []
    pro_tips: List[str] = []
    default_sets: int
    default_reps: int
    default_duration: int
    demo_video: Optional[str] = None
    demo_image: Optional[str] = None
    created_by_id: int
    is_global: bool
    approved_by_admin: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
