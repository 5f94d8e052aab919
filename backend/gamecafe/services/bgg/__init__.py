"""BoardGameGeek catalog source."""
from gamecafe.services.bgg.client import BggClient
from gamecafe.services.bgg.types import BggGame, parse_search_ids, parse_thing

__all__ = ["BggClient", "BggGame", "parse_search_ids", "parse_thing"]
