"""Weekdays a user is free to play. Time slots are stored but not scored yet."""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from gamecafe.db.base import Base


class UserAvailability(Base):
    __tablename__ = "user_availability"
    __table_args__ = (CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_user_availability_day"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday ... 6 = Saturday
    time_slot_start = Column(String(8), nullable=True)
    time_slot_end = Column(String(8), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
