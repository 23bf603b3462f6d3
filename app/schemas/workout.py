from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.models.workout import CategoryEnum, DifficultyEnum, WorkoutStatusEnum
from app.models.workout_session import SessionStatusEnum
from app.schemas.section import SectionRead

class WorkoutExerciseInput(BaseModel):
    exercise_id: int
    sets: int = Field(default=3, ge=1)
    reps: int = Field(default=10, ge=0)
    weight: float = Field(default=0, ge=0)
    rpe: int = Field(default=7, ge=1, le=10)
    rest_time: int = Field(default=90, ge=0)
    order: int = 0

class WorkoutExerciseRead(WorkoutExerciseInput):
    id: int

    class Config:
        from_attributes = True

class WorkoutCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    category: CategoryEnum = CategoryEnum.mixed
    section_ids: List[int] = []
    exercises: List[WorkoutExerciseInput] = []
    estimated_duration: int = Field(default=0, ge=0)
    difficulty: DifficultyEnum = DifficultyEnum.beginner
    notes: Optional[str] = None
    calories: float = Field(default=0, ge=0)
    date: Optional[datetime] = None
    status: WorkoutStatusEnum = WorkoutStatusEnum.scheduled
    is_template: bool = False
    is_global: bool = False

class WorkoutUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[CategoryEnum] = None
    section_ids: Optional[List[int]] = None
    exercises: Optional[List[WorkoutExerciseInput]] = None
    estimated_duration: Optional[int] = Field(default=None, ge=0)
    difficulty: Optional[DifficultyEnum] = None
    notes: Optional[str] = None
    calories: Optional[float] = Field(default=None, ge=0)
    date: Optional[datetime] = None
    status: Optional[WorkoutStatusEnum] = None
    is_template: Optional[bool] = None
    is_global: Optional[bool] = None

class WorkoutResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    category: CategoryEnum
    sections: List[SectionRead] = []
    exercises: List[WorkoutExerciseRead] = []
    estimated_duration: int
    difficulty: DifficultyEnum
    notes: Optional[str] = None
    calories: float
    date: datetime
    status: WorkoutStatusEnum
    is_template: bool
    is_global: bool
    approved_by_admin: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# ---------- sessions ----------

class CompletedSetCreate(BaseModel):
    exercise_id: Optional[int] = None
    set_number: Optional[int] = Field(default=None, ge=1)
    reps: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    rpe: Optional[int] = Field(default=None, ge=1, le=10)

class CompletedSetRead(CompletedSetCreate):
    id: int
    completed_at: datetime

    class Config:
        from_attributes = True

class SessionProgressUpdate(BaseModel):
    current_exercise_index: Optional[int] = Field(default=None, ge=0)
    current_set_index: Optional[int] = Field(default=None, ge=0)

class WorkoutSessionRead(BaseModel):
    id: int
    workout_id: int
    user_id: int
    current_exercise_index: int
    current_set_index: int
    completed_sets: List[CompletedSetRead] = []
    status: SessionStatusEnum
    start_time: datetime
    end_time: Optional[datetime] = None

    class Config:
        from_attributes = True

class WorkoutStartResponse(BaseModel):
    workout: WorkoutResponse
    session: WorkoutSessionRead

class ActiveSessionResponse(BaseModel):
    session: WorkoutSessionRead
    workout: Optional[WorkoutResponse] = None
