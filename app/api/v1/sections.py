from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.section import SectionCreate, SectionUpdate, SectionRead, SectionStat
from app.services.section_service import section_service

router = APIRouter(tags=["sections"])


@router.post("", response_model=SectionRead, status_code=status.HTTP_201_CREATED)
async def create_section(
    data: SectionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await section_service.create(db, current_user, data)


@router.get("", response_model=List[SectionRead])
async def list_sections(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await section_service.list_visible(db, current_user.id)


@router.get("/stats", response_model=List[SectionStat])
async def section_stats(
    days: int = Query(30, ge=1, le=365),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Completed workouts per section, for the pie chart."""
    return await section_service.stats(db, current_user.id, days)


@router.get("/{section_id}", response_model=SectionRead)
async def get_section(
    section_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await section_service.get_visible(db, section_id, current_user.id)


@router.put("/{section_id}", response_model=SectionRead)
async def update_section(
    section_id: int,
    data: SectionUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await section_service.update(db, section_id, current_user, data)


@router.delete("/{section_id}")
async def delete_section(
    section_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await section_service.delete(db, section_id, current_user)
    return {"message": "Section removed"}
