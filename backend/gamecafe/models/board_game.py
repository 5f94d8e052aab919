"""
Catalog game, imported from BoardGameGeek.

List-valued fields (categories, mechanics, designers, artists, publishers) are stored as
JSON-encoded text so LIKE filters work on any backend.
"""
from sqlalchemy import Boolean, Column, Integer, String, Text

from gamecafe.db.base import Base


class BoardGame(Base):
    __tablename__ = "board_games"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bgg_id = Column(String(32), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    year_published = Column(Integer, nullable=True)
    min_players = Column(Integer, nullable=True)
    max_players = Column(Integer, nullable=True)
    playing_time = Column(Integer, nullable=True)
    min_play_time = Column(Integer, nullable=True)
    max_play_time = Column(Integer, nullable=True)
    age = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    thumbnail = Column(Text, nullable=True)
    image = Column(Text, nullable=True)
    categories = Column(Text, nullable=True)
    mechanics = Column(Text, nullable=True)
    designers = Column(Text, nullable=True)
    artists = Column(Text, nullable=True)
    publishers = Column(Text, nullable=True)
    is_starred = Column(Boolean, nullable=False, default=False)
    admin_note = Column(Text, nullable=True)
