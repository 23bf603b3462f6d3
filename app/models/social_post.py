import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.base import Base
from datetime import datetime

class VisibilityEnum(str, enum.Enum):
    public = "public"
    friends = "friends"

class SocialPost(Base):
    __tablename__ = "social_posts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(String(2000), nullable=True)
    media_urls = Column(JSON, default=list)
    challenge_id = Column(Integer, ForeignKey("challenges.id"), nullable=True)
    visibility = Column(Enum(VisibilityEnum), default=VisibilityEnum.public, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    user = relationship("User", lazy="selectin")
    likes = relationship("PostLike", cascade="all, delete-orphan", lazy="selectin")
    comments = relationship(
        "PostComment",
        cascade="all, delete-orphan",
        order_by="PostComment.id",
        lazy="selectin",
    )

    @property
    def liked_by(self):
        return [like.user_id for like in self.likes]

    @property
    def like_count(self):
        return len(self.likes)

class PostLike(Base):
    __tablename__ = "post_likes"

    id = Column(Integer, primary_key=True)
    post_id = Column(Integer, ForeignKey("social_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_post_like"),
    )

class PostComment(Base):
    __tablename__ = "post_comments"

    id = Column(Integer, primary_key=True)
    post_id = Column(Integer, ForeignKey("social_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", lazy="selectin")
