import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.conversation import Message
from app.models.user import User
from app.services.conversation_service import conversation_service

logger = logging.getLogger(__name__)

# Messages fetched per conversation when building chat-list previews
PREVIEW_WINDOW = 5


class MessagingService:
    async def send(self, db: AsyncSession, conversation_id: int, sender: User, content: Optional[str]) -> Message:
        conversation = await conversation_service.get_for_member(db, conversation_id, sender.id)

        content = (content or "").strip()
        if not content:
            raise HTTPException(status_code=400, detail="Message cannot be empty")

        now = datetime.utcnow()
        message = Message(
            conversation_id=conversation.id,
            sender_id=sender.id,
            content=content,
            created_at=now,
        )
        message.sender = sender
        db.add(message)
        conversation.updated_at = now
        await db.commit()
        logger.debug("User %s posted message %s to conversation %s", sender.id, message.id, conversation.id)
        return message

    async def list_recent(
        self,
        db: AsyncSession,
        conversation_id: int,
        user_id: int,
        limit: Optional[int] = None,
    ) -> List[Message]:
        """Latest messages of a conversation, oldest first."""
        conversation = await conversation_service.get_for_member(db, conversation_id, user_id)

        result = await db.execute(
            select(Message)
            .where(Message.conversation_id == conversation.id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit or settings.MESSAGE_PAGE_SIZE)
        )
        messages = list(result.scalars().all())
        messages.reverse()
        return messages

    async def last_messages(self, db: AsyncSession, conversation_ids: Sequence[int]) -> Dict[int, Message]:
        """
        Preview message per conversation from one batched query.

        Only the newest PREVIEW_WINDOW * len(conversation_ids) messages overall
        are read, so a quiet conversation next to a busy one can come back
        without a preview.
        """
        if not conversation_ids:
            return {}

        result = await db.execute(
            select(Message)
            .where(Message.conversation_id.in_(list(conversation_ids)))
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(PREVIEW_WINDOW * len(conversation_ids))
        )
        previews: Dict[int, Message] = {}
        for message in result.scalars().all():
            previews.setdefault(message.conversation_id, message)
        return previews


messaging_service = MessagingService()
