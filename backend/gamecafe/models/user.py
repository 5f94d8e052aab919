"""
Café member: login identity plus Party Finder profile and activity tracking.
"""
from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.sql import func

from gamecafe.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=True, unique=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Party Finder profile
    display_name = Column(String(128), nullable=True)
    bio = Column(Text, nullable=True)
    experience_level = Column(String(16), nullable=True)  # beginner | intermediate | advanced
    vibe_preference = Column(String(16), nullable=True)  # casual | competitive | both
    looking_for_party = Column(Boolean, nullable=False, default=False)
    party_status = Column(String(16), nullable=False, default="resting")  # active | resting
    open_to_any_game = Column(Boolean, nullable=False, default=False)

    # Contact & privacy
    contact_method = Column(String(32), nullable=True)  # e.g. email, phone, discord
    contact_value = Column(String(255), nullable=True)
    contact_visible_to = Column(String(16), nullable=False, default="matches")  # none | matches | all

    last_login = Column(DateTime(timezone=True), nullable=True, index=True)
