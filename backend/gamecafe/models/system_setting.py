"""Mutable key/value settings edited from the admin page (e.g. party_finder_inactive_days)."""
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from gamecafe.db.base import Base


class SystemSetting(Base):
    __tablename__ = "system_settings"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
