"""Game comments: visitor comments on catalog games, approved by an admin before display."""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "game_comments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("game_bgg_id", sa.String(32), sa.ForeignKey("board_games.bgg_id"), nullable=False),
        sa.Column("author_name", sa.String(128), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_game_comments_game_bgg_id", "game_comments", ["game_bgg_id"], unique=False)
    op.create_index("ix_game_comments_created_at", "game_comments", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_game_comments_created_at", table_name="game_comments")
    op.drop_index("ix_game_comments_game_bgg_id", table_name="game_comments")
    op.drop_table("game_comments")
