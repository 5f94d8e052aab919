"""
Party Finder: match café members by availability, game preferences and playing style.

- compatibility: 0-100 score between two players (pure).
- cache: in-process TTL cache for directory lookups, invalidated by key substring.
- directory: filter / score / sort / paginate candidates; cached pool loading.
- activity: inactivity sweeper and reactivation on login.
"""

from gamecafe.services.party_finder.activity import (
    CleanupResult,
    cleanup_inactive_users,
    get_inactive_days_threshold,
    reactivate_user_if_auto_rested,
    should_user_be_visible,
)
from gamecafe.services.party_finder.cache import TTLCache, invalidate_directory_caches
from gamecafe.services.party_finder.compatibility import compatibility_breakdown, score_compatibility
from gamecafe.services.party_finder.directory import PlayerDirectory, list_players
from gamecafe.services.party_finder.repository import PlayerRepository
from gamecafe.services.party_finder.types import PlayerFilters

__all__ = [
    "CleanupResult",
    "PlayerDirectory",
    "PlayerFilters",
    "PlayerRepository",
    "TTLCache",
    "cleanup_inactive_users",
    "compatibility_breakdown",
    "get_inactive_days_threshold",
    "invalidate_directory_caches",
    "list_players",
    "reactivate_user_if_auto_rested",
    "score_compatibility",
    "should_user_be_visible",
]
