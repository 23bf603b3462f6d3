import logging
import secrets
from typing import List, Optional, Sequence, Tuple

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.rbac import is_admin
from app.models.conversation import Conversation, ConversationMember, ConversationTypeEnum
from app.models.friend_request import pair_key
from app.models.user import User

logger = logging.getLogger(__name__)

JOIN_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
JOIN_CODE_LENGTH = 6
JOIN_CODE_ATTEMPTS = 5
GROUP_NAME_MIN_LENGTH = 3


def generate_join_code() -> str:
    return "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))


def unique_member_ids(member_ids: Sequence[int], initiator_id: int) -> List[int]:
    """Deduplicate while keeping first-seen order; the initiator is always included."""
    seen = []
    for member_id in list(member_ids) + [initiator_id]:
        if member_id not in seen:
            seen.append(member_id)
    return seen


class ConversationService:
    async def get_for_member(self, db: AsyncSession, conversation_id: int, user_id: int) -> Conversation:
        conversation = await db.get(Conversation, conversation_id)
        if conversation is None or not conversation.has_member(user_id):
            raise HTTPException(status_code=404, detail="Conversation not found")
        return conversation

    async def list_for_user(self, db: AsyncSession, user_id: int) -> List[Conversation]:
        result = await db.execute(
            select(Conversation)
            .join(ConversationMember, ConversationMember.conversation_id == Conversation.id)
            .where(ConversationMember.user_id == user_id)
            .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
        )
        return list(result.scalars().unique().all())

    async def find_direct(self, db: AsyncSession, first_id: int, second_id: int) -> Optional[Conversation]:
        result = await db.execute(
            select(Conversation).where(Conversation.direct_key == pair_key(first_id, second_id))
        )
        return result.scalar_one_or_none()

    async def ensure_direct(self, db: AsyncSession, first_id: int, second_id: int) -> Tuple[Conversation, bool]:
        """
        Return the direct conversation between two users, creating it if needed.

        The second element of the tuple tells whether a new row was created.
        A concurrent insert of the same pair loses on the direct_key unique
        constraint and falls back to the row that won.
        """
        existing = await self.find_direct(db, first_id, second_id)
        if existing is not None:
            return existing, False

        conversation = Conversation(
            type=ConversationTypeEnum.direct,
            created_by_id=first_id,
            direct_key=pair_key(first_id, second_id),
            members=[
                ConversationMember(user_id=first_id),
                ConversationMember(user_id=second_id),
            ],
        )
        try:
            async with db.begin_nested():
                db.add(conversation)
        except IntegrityError:
            logger.warning("Direct conversation %s created concurrently", pair_key(first_id, second_id))
            existing = await self.find_direct(db, first_id, second_id)
            if existing is None:
                raise
            return existing, False

        await db.commit()
        logger.info("Created direct conversation %s between %s and %s", conversation.id, first_id, second_id)
        return conversation, True

    async def generate_unique_join_code(self, db: AsyncSession) -> str:
        while True:
            code = generate_join_code()
            result = await db.execute(select(Conversation.id).where(Conversation.join_code == code))
            if result.first() is None:
                return code

    async def _insert_with_join_code(self, db: AsyncSession, conversation: Conversation) -> Conversation:
        # The lookup in generate_unique_join_code can race with another insert;
        # the unique index on join_code decides and we draw again.
        for attempt in range(JOIN_CODE_ATTEMPTS):
            conversation.join_code = await self.generate_unique_join_code(db)
            try:
                async with db.begin_nested():
                    db.add(conversation)
            except IntegrityError:
                logger.warning("Join code collision on attempt %s", attempt + 1)
                continue
            await db.commit()
            return conversation
        raise HTTPException(status_code=500, detail="Could not allocate a join code")

    async def _ensure_members_exist(self, db: AsyncSession, member_ids: List[int]) -> None:
        result = await db.execute(select(User.id).where(User.id.in_(member_ids)))
        found = {row[0] for row in result.all()}
        if len(found) != len(member_ids):
            raise HTTPException(status_code=404, detail="User not found")

    async def create_conversation(
        self,
        db: AsyncSession,
        initiator: User,
        member_ids: Sequence[int],
        type: Optional[ConversationTypeEnum] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Tuple[Conversation, bool]:
        if not member_ids:
            raise HTTPException(status_code=400, detail="Members are required")

        members = unique_member_ids(member_ids, initiator.id)
        await self._ensure_members_exist(db, members)

        if type == ConversationTypeEnum.direct or len(members) == 2:
            if len(members) != 2:
                raise HTTPException(status_code=400, detail="A direct conversation needs exactly two members")
            existing = await self.find_direct(db, members[0], members[1])
            if existing is not None:
                return existing, False

        conversation_type = type or (ConversationTypeEnum.group if len(members) > 2 else ConversationTypeEnum.direct)

        if conversation_type == ConversationTypeEnum.direct:
            return await self.ensure_direct(db, members[0], members[1])

        if conversation_type == ConversationTypeEnum.community and not is_admin(initiator):
            raise HTTPException(status_code=403, detail="Only gym owners/admins can create communities")

        name = (name or "").strip()
        if conversation_type == ConversationTypeEnum.group and len(name) < GROUP_NAME_MIN_LENGTH:
            raise HTTPException(status_code=400, detail="Group name must be at least 3 characters")

        conversation = Conversation(
            name=name or None,
            type=conversation_type,
            description=description,
            created_by_id=initiator.id,
            members=[ConversationMember(user_id=member_id) for member_id in members],
        )
        conversation = await self._insert_with_join_code(db, conversation)
        logger.info(
            "User %s created %s conversation %s with %s members",
            initiator.id, conversation_type.value, conversation.id, len(members),
        )
        return conversation, True

    async def add_member(self, db: AsyncSession, conversation: Conversation, user_id: int) -> bool:
        """Idempotent membership; returns False when the user was already a member."""
        if conversation.has_member(user_id):
            return False
        conversation_id = conversation.id
        try:
            async with db.begin_nested():
                conversation.members.append(ConversationMember(user_id=user_id))
        except IntegrityError:
            logger.warning("User %s joined conversation %s concurrently", user_id, conversation_id)
            await db.refresh(conversation)
            return False
        await db.commit()
        return True

    async def join_by_code(self, db: AsyncSession, user: User, join_code: Optional[str]) -> Conversation:
        code = (join_code or "").strip().upper()
        if not code:
            raise HTTPException(status_code=400, detail="Join code is required")

        result = await db.execute(
            select(Conversation).where(
                Conversation.join_code == code,
                Conversation.type == ConversationTypeEnum.group,
            )
        )
        conversation = result.scalar_one_or_none()
        if conversation is None:
            raise HTTPException(status_code=404, detail="Group not found")

        if await self.add_member(db, conversation, user.id):
            logger.info("User %s joined group %s by code", user.id, conversation.id)
        return conversation

    async def join_community(self, db: AsyncSession, user: User, community_id: int) -> Conversation:
        community = await db.get(Conversation, community_id)
        if community is None or community.type != ConversationTypeEnum.community:
            raise HTTPException(status_code=404, detail="Community not found")

        if await self.add_member(db, community, user.id):
            logger.info("User %s joined community %s", user.id, community.id)
        return community

    async def list_communities(self, db: AsyncSession, query: Optional[str] = None) -> List[Conversation]:
        stmt = select(Conversation).where(Conversation.type == ConversationTypeEnum.community)
        if query:
            stmt = stmt.where(Conversation.name.ilike(f"%{query}%"))
        stmt = stmt.order_by(Conversation.created_at.desc(), Conversation.id.desc())
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def create_community(
        self,
        db: AsyncSession,
        creator: User,
        name: Optional[str],
        description: Optional[str] = None,
    ) -> Conversation:
        if not is_admin(creator):
            raise HTTPException(status_code=403, detail="Only gym owners/admins can create communities")

        name = (name or "").strip()
        if not name:
            raise HTTPException(status_code=400, detail="Community name is required")

        community = Conversation(
            name=name,
            description=description,
            type=ConversationTypeEnum.community,
            created_by_id=creator.id,
            gym_owner_id=creator.id,
            members=[ConversationMember(user_id=creator.id)],
        )
        community = await self._insert_with_join_code(db, community)
        logger.info("Admin %s created community %s", creator.id, community.id)
        return community


conversation_service = ConversationService()
