"""A user's interest in a catalog game (by BoardGameGeek id)."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from gamecafe.db.base import Base


class UserGamePreference(Base):
    __tablename__ = "user_game_preferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    game_bgg_id = Column(String(32), ForeignKey("board_games.bgg_id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
