from gamecafe.db.base import Base
from gamecafe.db.session import get_db, engine, SessionLocal
from gamecafe.db.tables import ALL_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "ALL_TABLE_NAMES"]
