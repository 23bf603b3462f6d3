from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.core.dependencies import get_current_user, get_user_repository
from app.models.conversation import Conversation, ConversationTypeEnum
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.social import (
    ChallengeCreate,
    ChallengeRead,
    CommentCreate,
    CommunityCreate,
    ConversationCreate,
    ConversationRead,
    FriendRequestCreate,
    FriendRequestRead,
    FriendRequestRespond,
    IncomingRequestRead,
    JoinGroupRequest,
    LeaderboardResponse,
    MessageCreate,
    MessageRead,
    NotificationRead,
    OutgoingRequestRead,
    PostCreate,
    PostRead,
    SocialSummary,
)
from app.schemas.user import UserPreview
from app.services.challenge_service import challenge_service
from app.services.conversation_service import conversation_service
from app.services.messaging_service import messaging_service
from app.services.notification_service import notification_service
from app.services.post_service import post_service
from app.services.relationship_service import relationship_service

router = APIRouter(tags=["social"])

SUMMARY_POSTS = 20
SUMMARY_CHALLENGES = 5
SUMMARY_NOTIFICATIONS = 15


async def with_last_messages(db: AsyncSession, conversations: List[Conversation]) -> List[ConversationRead]:
    previews = await messaging_service.last_messages(db, [c.id for c in conversations])
    items = []
    for conversation in conversations:
        item = ConversationRead.model_validate(conversation)
        preview = previews.get(conversation.id)
        item.last_message = MessageRead.model_validate(preview) if preview else None
        items.append(item)
    return items


@router.get("/summary", response_model=SocialSummary)
async def social_summary(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Everything the social page needs in one call; queries run one after another on the request session."""
    friends = await relationship_service.list_friends(db, current_user.id)
    incoming = await relationship_service.pending_incoming(db, current_user.id)
    outgoing = await relationship_service.pending_outgoing(db, current_user.id)
    conversations = await with_last_messages(
        db, await conversation_service.list_for_user(db, current_user.id)
    )
    posts = await post_service.feed(db, current_user.id, limit=SUMMARY_POSTS)
    challenges = await challenge_service.list_latest(db, limit=SUMMARY_CHALLENGES)
    notifications = await notification_service.list_for_user(db, current_user.id, limit=SUMMARY_NOTIFICATIONS)
    unread = await notification_service.unread_count(db, current_user.id)

    return SocialSummary(
        friends=[UserPreview.model_validate(f) for f in friends],
        pending_requests=[IncomingRequestRead.model_validate(r) for r in incoming],
        outgoing_requests=[OutgoingRequestRead.model_validate(r) for r in outgoing],
        chats=[c for c in conversations if c.type == ConversationTypeEnum.direct],
        groups=[c for c in conversations if c.type != ConversationTypeEnum.direct],
        posts=[PostRead.model_validate(p) for p in posts],
        challenges=[ChallengeRead.model_validate(c) for c in challenges],
        notifications=[NotificationRead.model_validate(n) for n in notifications],
        unread_notification_count=unread,
    )


# ---------- friends ----------

@router.get("/search", response_model=List[UserPreview])
async def search_users(
    query: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    return await relationship_service.search_users(repo, query, current_user.id)


@router.get("/friends", response_model=List[UserPreview])
async def list_friends(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await relationship_service.list_friends(db, current_user.id)


@router.post("/friend-request", response_model=FriendRequestRead, status_code=status.HTTP_201_CREATED)
async def send_friend_request(
    data: FriendRequestCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await relationship_service.send_request(db, current_user, data.recipient_id)


@router.put("/friend-request/{request_id}/respond", response_model=FriendRequestRead)
async def respond_friend_request(
    request_id: int,
    data: FriendRequestRespond,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await relationship_service.respond(db, request_id, current_user, data.action)


# ---------- conversations ----------

@router.post("/conversations", response_model=ConversationRead)
async def create_conversation(
    data: ConversationCreate,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Existing direct conversations come back with 200, new ones with 201."""
    conversation, created = await conversation_service.create_conversation(
        db,
        current_user,
        data.member_ids or [],
        type=data.type,
        name=data.name,
        description=data.description,
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return conversation


@router.get("/conversations/{conversation_id}/messages", response_model=List[MessageRead])
async def list_messages(
    conversation_id: int,
    limit: int = Query(settings.MESSAGE_PAGE_SIZE, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await messaging_service.list_recent(db, conversation_id, current_user.id, limit)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageRead,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    conversation_id: int,
    data: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await messaging_service.send(db, conversation_id, current_user, data.content)


@router.post("/groups/join", response_model=ConversationRead)
async def join_group(
    data: JoinGroupRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await conversation_service.join_by_code(db, current_user, data.join_code)


@router.post("/communities", response_model=ConversationRead, status_code=status.HTTP_201_CREATED)
async def create_community(
    data: CommunityCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await conversation_service.create_community(db, current_user, data.name, data.description)


@router.get("/communities", response_model=List[ConversationRead])
async def list_communities(
    query: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await conversation_service.list_communities(db, query)


@router.post("/communities/{community_id}/join", response_model=ConversationRead)
async def join_community(
    community_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await conversation_service.join_community(db, current_user, community_id)


# ---------- posts ----------

@router.post("/posts", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.create(db, current_user, data)


@router.put("/posts/{post_id}/like", response_model=PostRead)
async def toggle_like(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.toggle_like(db, post_id, current_user)


@router.post("/posts/{post_id}/comments", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: int,
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.add_comment(db, post_id, current_user, data.content)


# ---------- notifications ----------

@router.get("/notifications", response_model=List[NotificationRead])
async def list_notifications(
    unread_only: bool = False,
    limit: int = Query(settings.NOTIFICATION_PAGE_SIZE, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await notification_service.list_for_user(db, current_user.id, unread_only=unread_only, limit=limit)


@router.put("/notifications/{notification_id}/read", response_model=NotificationRead)
async def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await notification_service.mark_read(db, notification_id, current_user.id)


# ---------- challenges ----------

@router.get("/challenges", response_model=List[ChallengeRead])
async def list_challenges(
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await challenge_service.list_latest(db, limit=limit)


@router.post("/challenges", response_model=ChallengeRead, status_code=status.HTTP_201_CREATED)
async def create_challenge(
    data: ChallengeCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await challenge_service.create(db, current_user, data)


@router.post("/challenges/{challenge_id}/participate", response_model=ChallengeRead)
async def participate_in_challenge(
    challenge_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await challenge_service.participate(db, challenge_id, current_user)


@router.get("/challenges/{challenge_id}/leaderboard", response_model=LeaderboardResponse)
async def challenge_leaderboard(
    challenge_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await challenge_service.leaderboard(db, challenge_id)
