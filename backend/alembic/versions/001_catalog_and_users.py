"""Catalog (board_games), users with party finder profile, system_settings."""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("display_name", sa.String(128), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("experience_level", sa.String(16), nullable=True),
        sa.Column("vibe_preference", sa.String(16), nullable=True),
        sa.Column("looking_for_party", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("party_status", sa.String(16), nullable=False, server_default="resting"),
        sa.Column("open_to_any_game", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("contact_method", sa.String(32), nullable=True),
        sa.Column("contact_value", sa.String(255), nullable=True),
        sa.Column("contact_visible_to", sa.String(16), nullable=False, server_default="matches"),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_last_login", "users", ["last_login"], unique=False)

    op.create_table(
        "board_games",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("bgg_id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("year_published", sa.Integer(), nullable=True),
        sa.Column("min_players", sa.Integer(), nullable=True),
        sa.Column("max_players", sa.Integer(), nullable=True),
        sa.Column("playing_time", sa.Integer(), nullable=True),
        sa.Column("min_play_time", sa.Integer(), nullable=True),
        sa.Column("max_play_time", sa.Integer(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("thumbnail", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("categories", sa.Text(), nullable=True),
        sa.Column("mechanics", sa.Text(), nullable=True),
        sa.Column("designers", sa.Text(), nullable=True),
        sa.Column("artists", sa.Text(), nullable=True),
        sa.Column("publishers", sa.Text(), nullable=True),
        sa.Column("is_starred", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("admin_note", sa.Text(), nullable=True),
    )
    op.create_index("ix_board_games_bgg_id", "board_games", ["bgg_id"], unique=True)
    op.create_index("ix_board_games_name", "board_games", ["name"], unique=False)

    op.create_table(
        "system_settings",
        sa.Column("key", sa.String(64), primary_key=True),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("system_settings")
    op.drop_index("ix_board_games_name", table_name="board_games")
    op.drop_index("ix_board_games_bgg_id", table_name="board_games")
    op.drop_table("board_games")
    op.drop_index("ix_users_last_login", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
