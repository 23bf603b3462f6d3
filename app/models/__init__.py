from app.models.user import User
from app.models.section import WorkoutSection
from app.models.exercise import Exercise
from app.models.workout import Workout, WorkoutExercise
from app.models.workout_session import WorkoutSession, CompletedSet
from app.models.metrics import Metrics
from app.models.friend_request import FriendRequest
from app.models.conversation import Conversation, ConversationMember, Message
from app.models.challenge import Challenge, ChallengeParticipant
from app.models.social_post import SocialPost, PostLike, PostComment
from app.models.notification import Notification

__all__ = [
    "User",
    "WorkoutSection", "Exercise",
    "Workout", "WorkoutExercise",
    "WorkoutSession", "CompletedSet",
    "Metrics",
    "FriendRequest",
    "Conversation", "ConversationMember", "Message",
    "Challenge", "ChallengeParticipant",
    "SocialPost", "PostLike", "PostComment",
    "Notification",
]
