from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class SectionCreate(BaseModel):
    name: str = Field(min_length=1)
    color: Optional[str] = None
    is_global: bool = False

class SectionUpdate(BaseModel):
    name: Optional[str] = None
    color: Optional[str] = None

class SectionRead(BaseModel):
    id: int
    name: str
    color: str
    user_id: Optional[int] = None
    is_global: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SectionStat(BaseModel):
    id: int
    name: str
    color: str
    count: int
