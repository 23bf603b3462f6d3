import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, Enum, JSON, Index
from app.core.base import Base
from datetime import datetime

class NotificationTypeEnum(str, enum.Enum):
    friend = "friend"
    challenge = "challenge"
    post = "post"
    system = "system"
    message = "message"

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    type = Column(Enum(NotificationTypeEnum), default=NotificationTypeEnum.system, nullable=False)
    title = Column(String, nullable=True)
    message = Column(String, nullable=True)
    payload = Column(JSON, default=dict)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "read"),
    )
