"""
Centralized constants for the Party Finder, catalog and scheduler.

Change job IDs, TTLs or cache key prefixes here instead of scattering literals across
services and routes.
"""

# Scheduler job IDs (must match ids used in main.py add_job)
INACTIVE_CLEANUP_JOB_ID = "party_finder_inactive_cleanup"

# Inactivity threshold: system_settings key, fallback and admin-editable bounds
INACTIVE_DAYS_SETTING_KEY = "party_finder_inactive_days"
INACTIVE_DAYS_SETTING_DESCRIPTION = "Days before inactive users are automatically set to resting"
DEFAULT_INACTIVE_DAYS = 14
MIN_INACTIVE_DAYS = 1
MAX_INACTIVE_DAYS = 365

# Directory cache. Every key below contains PARTY_FINDER_CACHE_SCOPE so one invalidation
# drops them all; PLAYER_DISCOVERY_CACHE_SCOPE is reserved for discovery views.
PARTY_FINDER_CACHE_SCOPE = "party_finder"
PLAYER_DISCOVERY_CACHE_SCOPE = "player_discovery"
DIRECTORY_CACHE_SCOPES = (PARTY_FINDER_CACHE_SCOPE, PLAYER_DISCOVERY_CACHE_SCOPE)

PLAYERS_CACHE_PREFIX = "party_finder_players_"
AVAILABILITY_CACHE_PREFIX = "party_finder_availability_"
PREFERENCES_CACHE_PREFIX = "party_finder_preferences_"
INACTIVE_DAYS_CACHE_KEY = "party_finder_inactive_days_threshold"

PLAYERS_CACHE_TTL_SECONDS = 5 * 60
PLAYER_DETAILS_CACHE_TTL_SECONDS = 10 * 60
INACTIVE_DAYS_CACHE_TTL_SECONDS = 30 * 60

# Player listing defaults and caps
DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

# Game search (preference picker) and catalog
GAME_SEARCH_MIN_QUERY_LENGTH = 2
GAME_SEARCH_LIMIT = 20
SIMILAR_GAMES_LIMIT = 4
BGG_SEARCH_LIMIT = 10
BGG_REQUEST_DELAY_SECONDS = 0.666

# Game comments
COMMENT_AUTHOR_MAX_LENGTH = 128
COMMENT_CONTENT_MAX_LENGTH = 2000
