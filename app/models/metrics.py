from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, UniqueConstraint
from app.core.base import Base
from datetime import datetime

class Metrics(Base):
    __tablename__ = "metrics"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(DateTime, nullable=False)  # start of day
    calories = Column(Float, nullable=False)
    steps = Column(Integer, nullable=False)
    water_intake = Column(Float, nullable=False)
    sleep_hours = Column(Float, nullable=False)
    notes = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_metrics_user_date"),
    )
