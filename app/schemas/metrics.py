from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class MetricsCreate(BaseModel):
    date: Optional[datetime] = None
    calories: float = Field(ge=0)
    steps: int = Field(ge=0)
    water_intake: float = Field(ge=0)
    sleep_hours: float = Field(ge=0, le=24)
    notes: Optional[str] = Field(default=None, max_length=500)

class MetricsUpdate(BaseModel):
    date: Optional[datetime] = None
    calories: Optional[float] = Field(default=None, ge=0)
    steps: Optional[int] = Field(default=None, ge=0)
    water_intake: Optional[float] = Field(default=None, ge=0)
    sleep_hours: Optional[float] = Field(default=None, ge=0, le=24)
    notes: Optional[str] = Field(default=None, max_length=500)

class MetricsRead(BaseModel):
    id: int
    user_id: int
    date: datetime
    calories: float
    steps: int
    water_intake: float
    sleep_hours: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class MetricsSummary(BaseModel):
    calories: float = 0
    steps: float = 0
    water_intake: float = 0
    sleep_hours: float = 0

class MetricsDashboard(BaseModel):
    entries: List[MetricsRead]
    latest: Optional[MetricsRead] = None
    averages: MetricsSummary
    totals: MetricsSummary
