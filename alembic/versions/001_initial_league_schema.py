"""Create league tables.

Revision ID: 001_initial_league_schema
Revises:
Create Date: 2026-10-19

Creates members, game_records and game_results. Member statistics
columns are derived data, recomputed from game_results.
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001_initial_league_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create league tables."""
    op.create_table(
        "members",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("points", sa.Float(), nullable=False, server_default="0"),
        sa.Column("base_points", sa.Float(), nullable=False, server_default="0"),
        sa.Column("games", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("first", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("second", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("third", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("fourth", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("highest_score", sa.Integer(), nullable=True),
        sa.Column("cat_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("negative_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "game_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.String(64), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "game_results",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=True),
        sa.Column("member_name", sa.String(64), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=False),
        sa.Column("rank_bonus", sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(["game_id"], ["game_records.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["member_id"], ["members.id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("ix_game_results_game_id", "game_results", ["game_id"])
    op.create_index("ix_game_results_member_id", "game_results", ["member_id"])
    op.create_index("ix_game_results_member_name", "game_results", ["member_name"])


def downgrade() -> None:
    """Drop league tables."""
    op.drop_index("ix_game_results_member_name", "game_results")
    op.drop_index("ix_game_results_member_id", "game_results")
    op.drop_index("ix_game_results_game_id", "game_results")
    op.drop_table("game_results")
    op.drop_table("game_records")
    op.drop_table("members")
