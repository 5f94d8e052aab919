"""Party finder: user_availability (weekdays 0-6) and user_game_preferences (BGG ids).

Both cascade on user delete. Time slots on availability are reserved, not scored.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user_availability",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("time_slot_start", sa.String(8), nullable=True),
        sa.Column("time_slot_end", sa.String(8), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_user_availability_day"),
    )
    op.create_index("ix_user_availability_user_id", "user_availability", ["user_id"], unique=False)

    op.create_table(
        "user_game_preferences",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("game_bgg_id", sa.String(32), sa.ForeignKey("board_games.bgg_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_user_game_preferences_user_id", "user_game_preferences", ["user_id"], unique=False)
    op.create_index("ix_user_game_preferences_game_bgg_id", "user_game_preferences", ["game_bgg_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_user_game_preferences_game_bgg_id", table_name="user_game_preferences")
    op.drop_index("ix_user_game_preferences_user_id", table_name="user_game_preferences")
    op.drop_table("user_game_preferences")
    op.drop_index("ix_user_availability_user_id", table_name="user_availability")
    op.drop_table("user_availability")
