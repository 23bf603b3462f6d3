import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.notification import Notification, NotificationTypeEnum

logger = logging.getLogger(__name__)


class NotificationService:
    async def create(
        self,
        db: AsyncSession,
        user_id: int,
        type: NotificationTypeEnum,
        title: str,
        message: str,
        payload: Optional[dict] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            payload=payload or {},
            read=False,
        )
        db.add(notification)
        await db.commit()
        logger.debug("Notification %s (%s) for user %s", notification.id, type.value, user_id)
        return notification

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: int,
        unread_only: bool = False,
        limit: Optional[int] = None,
    ) -> List[Notification]:
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.read.is_(False))
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
        query = query.limit(limit or settings.NOTIFICATION_PAGE_SIZE)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def unread_count(self, db: AsyncSession, user_id: int) -> int:
        result = await db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
        )
        return result.scalar_one()

    async def mark_read(self, db: AsyncSession, notification_id: int, user_id: int) -> Notification:
        result = await db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        notification = result.scalar_one_or_none()
        if notification is None:
            raise HTTPException(status_code=404, detail="Notification not found")

        if not notification.read:
            notification.read = True
            await db.commit()
        return notification


notification_service = NotificationService()
