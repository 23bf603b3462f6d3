import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.friend_request import FriendRequest, FriendStatusEnum, pair_key
from app.models.notification import NotificationTypeEnum
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.services.conversation_service import conversation_service
from app.services.notification_service import notification_service

logger = logging.getLogger(__name__)

SEARCH_MIN_LENGTH = 2
FRIEND_ACTIONS = {
    "accept": FriendStatusEnum.accepted,
    "decline": FriendStatusEnum.declined,
}


class RelationshipService:
    async def send_request(self, db: AsyncSession, requester: User, recipient_id: Optional[int]) -> FriendRequest:
        if not recipient_id or recipient_id == requester.id:
            raise HTTPException(status_code=400, detail="Invalid recipient")

        recipient = await db.get(User, recipient_id)
        if recipient is None:
            raise HTTPException(status_code=404, detail="User not found")

        key = pair_key(requester.id, recipient_id)
        existing = await db.execute(select(FriendRequest.id).where(FriendRequest.pair_key == key))
        if existing.first() is not None:
            raise HTTPException(status_code=400, detail="A request already exists between these users")

        request = FriendRequest(
            requester_id=requester.id,
            recipient_id=recipient.id,
            pair_key=key,
            status=FriendStatusEnum.pending,
        )
        request.requester = requester
        request.recipient = recipient
        try:
            async with db.begin_nested():
                db.add(request)
        except IntegrityError:
            logger.warning("Friend request %s created concurrently", key)
            raise HTTPException(status_code=400, detail="A request already exists between these users")
        await db.commit()
        logger.info("User %s sent friend request %s to user %s", requester.id, request.id, recipient.id)

        await notification_service.create(
            db,
            user_id=recipient.id,
            type=NotificationTypeEnum.friend,
            title="New Friend Request",
            message=f"{requester.name} sent you a friend request",
            payload={"friend_request_id": request.id},
        )
        return request

    async def respond(self, db: AsyncSession, request_id: int, responder: User, action: Optional[str]) -> FriendRequest:
        result = await db.execute(
            select(FriendRequest).where(
                FriendRequest.id == request_id,
                FriendRequest.recipient_id == responder.id,
                FriendRequest.status == FriendStatusEnum.pending,
            )
        )
        request = result.scalar_one_or_none()
        if request is None:
            raise HTTPException(status_code=404, detail="Friend request not found")

        if action not in FRIEND_ACTIONS:
            raise HTTPException(status_code=400, detail="Invalid action")

        request.status = FRIEND_ACTIONS[action]
        await db.commit()
        logger.info("User %s answered friend request %s with %s", responder.id, request.id, action)

        if request.status == FriendStatusEnum.accepted:
            await conversation_service.ensure_direct(db, request.requester_id, responder.id)
            await notification_service.create(
                db,
                user_id=request.requester_id,
                type=NotificationTypeEnum.friend,
                title="Friend Request Accepted",
                message=f"{responder.name} accepted your friend request",
                payload={"friend_request_id": request.id},
            )
        return request

    async def list_friends(self, db: AsyncSession, user_id: int) -> List[User]:
        result = await db.execute(
            select(FriendRequest)
            .where(
                FriendRequest.status == FriendStatusEnum.accepted,
                or_(FriendRequest.requester_id == user_id, FriendRequest.recipient_id == user_id),
            )
            .order_by(FriendRequest.id)
        )
        return [
            request.recipient if request.requester_id == user_id else request.requester
            for request in result.scalars().all()
        ]

    async def pending_incoming(self, db: AsyncSession, user_id: int) -> List[FriendRequest]:
        result = await db.execute(
            select(FriendRequest)
            .where(FriendRequest.status == FriendStatusEnum.pending, FriendRequest.recipient_id == user_id)
            .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
        )
        return list(result.scalars().all())

    async def pending_outgoing(self, db: AsyncSession, user_id: int) -> List[FriendRequest]:
        result = await db.execute(
            select(FriendRequest)
            .where(FriendRequest.status == FriendStatusEnum.pending, FriendRequest.requester_id == user_id)
            .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
        )
        return list(result.scalars().all())

    async def search_users(self, repo: UserRepository, query: Optional[str], exclude_user_id: int) -> List[User]:
        term = (query or "").strip()
        if len(term) < SEARCH_MIN_LENGTH:
            return []
        return await repo.search(term, exclude_user_id)


relationship_service = RelationshipService()
