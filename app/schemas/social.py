from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.models.conversation import ConversationTypeEnum
from app.models.friend_request import FriendStatusEnum
from app.models.notification import NotificationTypeEnum
from app.models.social_post import VisibilityEnum
from app.models.workout import DifficultyEnum
from app.schemas.user import UserPreview

# ---------- friends ----------

class FriendRequestCreate(BaseModel):
    recipient_id: Optional[int] = None

class FriendRequestRespond(BaseModel):
    action: str  # "accept" or "decline"

class FriendRequestRead(BaseModel):
    id: int
    requester_id: int
    recipient_id: int
    status: FriendStatusEnum
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class IncomingRequestRead(BaseModel):
    id: int
    requester: UserPreview
    status: FriendStatusEnum
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OutgoingRequestRead(BaseModel):
    id: int
    recipient: UserPreview
    status: FriendStatusEnum
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# ---------- conversations ----------

class ConversationCreate(BaseModel):
    member_ids: Optional[List[int]] = None
    name: Optional[str] = None
    type: Optional[ConversationTypeEnum] = None
    description: Optional[str] = None

class JoinGroupRequest(BaseModel):
    join_code: Optional[str] = None

class CommunityCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

class MessageCreate(BaseModel):
    content: Optional[str] = None

class MessageRead(BaseModel):
    id: int
    conversation_id: int
    sender_id: int
    sender: Optional[UserPreview] = None
    content: str
    created_at: datetime

    class Config:
        from_attributes = True

class ConversationRead(BaseModel):
    id: int
    name: Optional[str] = None
    type: ConversationTypeEnum
    description: Optional[str] = None
    created_by_id: Optional[int] = None
    gym_owner_id: Optional[int] = None
    join_code: Optional[str] = None
    member_ids: List[int] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_message: Optional[MessageRead] = None

    class Config:
        from_attributes = True

# ---------- posts ----------

class PostCreate(BaseModel):
    content: Optional[str] = None
    media_urls: List[str] = []
    challenge_id: Optional[int] = None
    visibility: VisibilityEnum = VisibilityEnum.public

class CommentCreate(BaseModel):
    content: Optional[str] = None

class CommentRead(BaseModel):
    id: int
    user: Optional[UserPreview] = None
    content: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PostRead(BaseModel):
    id: int
    user: Optional[UserPreview] = None
    content: Optional[str] = None
    media_urls: List[str] = []
    challenge_id: Optional[int] = None
    visibility: VisibilityEnum
    like_count: int = 0
    liked_by: List[int] = []
    comments: List[CommentRead] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# ---------- challenges ----------

class ChallengeCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    difficulty: Optional[DifficultyEnum] = None
    deadline: Optional[datetime] = None
    reward: Optional[str] = None

class ParticipantRead(BaseModel):
    user_id: int
    user: Optional[UserPreview] = None
    progress: int
    completed: bool
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ChallengeRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    created_by_id: int
    difficulty: DifficultyEnum
    deadline: Optional[datetime] = None
    reward: Optional[str] = None
    participants: List[ParticipantRead] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class LeaderboardEntry(BaseModel):
    rank: int
    user: Optional[UserPreview] = None
    completed_at: datetime

    class Config:
        from_attributes = True

class LeaderboardResponse(BaseModel):
    challenge: Dict[str, Any]
    leaderboard: List[LeaderboardEntry]

# ---------- notifications ----------

class NotificationRead(BaseModel):
    id: int
    type: NotificationTypeEnum
    title: Optional[str] = None
    message: Optional[str] = None
    payload: Dict[str, Any] = {}
    read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# ---------- summary ----------

class SocialSummary(BaseModel):
    friends: List[UserPreview]
    pending_requests: List[IncomingRequestRead]
    outgoing_requests: List[OutgoingRequestRead]
    chats: List[ConversationRead]
    groups: List[ConversationRead]
    posts: List[PostRead]
    challenges: List[ChallengeRead]
    notifications: List[NotificationRead]
    unread_notification_count: int
