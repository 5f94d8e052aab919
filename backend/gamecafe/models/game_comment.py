"""Visitor comment on a catalog game. Hidden from the public until an admin approves it."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from gamecafe.db.base import Base


class GameComment(Base):
    __tablename__ = "game_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    game_bgg_id = Column(String(32), ForeignKey("board_games.bgg_id"), nullable=False, index=True)
    author_name = Column(String(128), nullable=False)
    content = Column(Text, nullable=False)
    is_approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
