import logging
from datetime import datetime, date, time, timedelta
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.metrics import Metrics
from app.models.user import User
from app.schemas.metrics import MetricsCreate, MetricsUpdate, MetricsDashboard, MetricsRead, MetricsSummary

logger = logging.getLogger(__name__)

DUPLICATE_DAY = "Metrics entry already exists for this date"
SUMMARY_FIELDS = ("calories", "steps", "water_intake", "sleep_hours")


def start_of_day(value: Optional[datetime] = None) -> datetime:
    value = value or datetime.utcnow()
    return datetime.combine(value.date(), time.min)


class MetricsService:
    async def get_owned(self, db: AsyncSession, metrics_id: int, user_id: int) -> Metrics:
        result = await db.execute(
            select(Metrics).where(Metrics.id == metrics_id, Metrics.user_id == user_id)
        )
        metrics = result.scalar_one_or_none()
        if metrics is None:
            raise HTTPException(status_code=404, detail="Metrics not found")
        return metrics

    async def _day_taken(self, db: AsyncSession, user_id: int, day: datetime, exclude_id: Optional[int] = None) -> bool:
        query = select(Metrics.id).where(Metrics.user_id == user_id, Metrics.date == day)
        if exclude_id is not None:
            query = query.where(Metrics.id != exclude_id)
        result = await db.execute(query)
        return result.first() is not None

    async def create(self, db: AsyncSession, user: User, data: MetricsCreate) -> Metrics:
        day = start_of_day(data.date)
        if await self._day_taken(db, user.id, day):
            raise HTTPException(status_code=400, detail=DUPLICATE_DAY)

        metrics = Metrics(
            user_id=user.id,
            date=day,
            calories=data.calories,
            steps=data.steps,
            water_intake=data.water_intake,
            sleep_hours=data.sleep_hours,
            notes=data.notes,
        )
        try:
            async with db.begin_nested():
                db.add(metrics)
        except IntegrityError:
            logger.warning("Metrics for user %s on %s created concurrently", user.id, day.date())
            raise HTTPException(status_code=400, detail=DUPLICATE_DAY)
        await db.commit()
        return metrics

    async def list_since(self, db: AsyncSession, user_id: int, since: datetime, until: Optional[datetime] = None) -> List[Metrics]:
        query = select(Metrics).where(Metrics.user_id == user_id, Metrics.date >= since)
        if until is not None:
            query = query.where(Metrics.date < until)
        result = await db.execute(query.order_by(Metrics.date.asc()))
        return list(result.scalars().all())

    async def list_recent(self, db: AsyncSession, user_id: int, days: int = 30) -> List[Metrics]:
        return await self.list_since(db, user_id, datetime.utcnow() - timedelta(days=days))

    async def history(
        self,
        db: AsyncSession,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        days: Optional[int] = None,
    ) -> List[Metrics]:
        if start_date and end_date:
            since = datetime.combine(start_date, time.min)
            until = datetime.combine(end_date, time.min) + timedelta(days=1)
            return await self.list_since(db, user_id, since, until)
        return await self.list_recent(db, user_id, days or 30)

    async def dashboard(self, db: AsyncSession, user_id: int, days: int = 30) -> MetricsDashboard:
        entries = await self.list_recent(db, user_id, max(1, days))

        totals = {field: 0 for field in SUMMARY_FIELDS}
        for entry in entries:
            for field in SUMMARY_FIELDS:
                totals[field] += getattr(entry, field) or 0

        if entries:
            averages = {field: totals[field] / len(entries) for field in SUMMARY_FIELDS}
        else:
            averages = {field: 0 for field in SUMMARY_FIELDS}

        return MetricsDashboard(
            entries=[MetricsRead.model_validate(entry) for entry in entries],
            latest=MetricsRead.model_validate(entries[-1]) if entries else None,
            averages=MetricsSummary(**averages),
            totals=MetricsSummary(**totals),
        )

    async def update(self, db: AsyncSession, metrics_id: int, user_id: int, data: MetricsUpdate) -> Metrics:
        metrics = await self.get_owned(db, metrics_id, user_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("date"):
            day = start_of_day(changes.pop("date"))
            if await self._day_taken(db, user_id, day, exclude_id=metrics.id):
                raise HTTPException(status_code=400, detail=DUPLICATE_DAY)
            metrics.date = day
        changes.pop("date", None)

        for field, value in changes.items():
            if value is None and field != "notes":
                continue
            setattr(metrics, field, value)
        await db.commit()
        return metrics

    async def delete(self, db: AsyncSession, metrics_id: int, user_id: int) -> None:
        metrics = await self.get_owned(db, metrics_id, user_id)
        await db.delete(metrics)
        await db.commit()


metrics_service = MetricsService()
