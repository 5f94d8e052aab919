"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL (e.g. TRUNCATE). alembic/env.py asserts the
registered models match this tuple.
"""
ALL_TABLE_NAMES = (
    "users",
    "user_availability",
    "user_game_preferences",
    "board_games",
    "game_comments",
    "system_settings",
)
