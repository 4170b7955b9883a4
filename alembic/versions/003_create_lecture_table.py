"""Create lecture table

Revision ID: 003
Revises: 002
Create Date: 2025-10-13

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "003"
down_revision: str | None = "002"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "lecture",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("category.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("audio_url", sa.Text(), nullable=False, server_default=""),
        sa.Column("audio_format", sa.String(length=10), nullable=True),
        sa.Column("file_size", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("recording_date", sa.Date(), nullable=False),
        sa.Column("recording_quality", sa.String(length=16), nullable=False, server_default="auto"),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="recording"),
        sa.Column("processing_progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_favorite", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("play_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_played_at", sa.DateTime(), nullable=True),
        sa.Column("playback_position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("share_token", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("share_token"),
    )
    op.create_index(op.f("ix_lecture_user_id"), "lecture", ["user_id"])
    op.create_index(op.f("ix_lecture_category_id"), "lecture", ["category_id"])
    op.create_index(op.f("ix_lecture_status"), "lecture", ["status"])
    op.create_index("ix_lecture_user_id_created_at", "lecture", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_lecture_user_id_created_at", table_name="lecture")
    op.drop_index(op.f("ix_lecture_status"), table_name="lecture")
    op.drop_index(op.f("ix_lecture_category_id"), table_name="lecture")
    op.drop_index(op.f("ix_lecture_user_id"), table_name="lecture")
    op.drop_table("lecture")
