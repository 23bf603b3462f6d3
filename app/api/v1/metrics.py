from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.metrics import MetricsCreate, MetricsUpdate, MetricsRead, MetricsDashboard
from app.services.metrics_service import metrics_service

router = APIRouter(tags=["metrics"])


@router.post("", response_model=MetricsRead, status_code=status.HTTP_201_CREATED)
async def create_metrics(
    data: MetricsCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await metrics_service.create(db, current_user, data)


@router.get("", response_model=List[MetricsRead])
async def list_metrics(
    days: int = Query(30, ge=1),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await metrics_service.list_recent(db, current_user.id, days)


@router.get("/history", response_model=List[MetricsRead])
async def metrics_history(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    days: Optional[int] = Query(None, ge=1),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await metrics_service.history(
        db, current_user.id, start_date=start_date, end_date=end_date, days=days
    )


@router.get("/dashboard", response_model=MetricsDashboard)
async def metrics_dashboard(
    days: int = Query(30),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await metrics_service.dashboard(db, current_user.id, days)


@router.put("/{metrics_id}", response_model=MetricsRead)
async def update_metrics(
    metrics_id: int,
    data: MetricsUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await metrics_service.update(db, metrics_id, current_user.id, data)


@router.delete("/{metrics_id}")
async def delete_metrics(
    metrics_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await metrics_service.delete(db, metrics_id, current_user.id)
    return {"message": "Metrics removed"}
