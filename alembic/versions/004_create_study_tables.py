"""Create bookmark, flashcard, quiz_attempt and study_session tables

Revision ID: 004
Revises: 003
Create Date: 2025-10-14

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "004"
down_revision: str | None = "003"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "bookmark",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lecture_id", sa.String(length=36), sa.ForeignKey("lecture.id"), nullable=False),
        sa.Column("position_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("label", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bookmark_lecture_id"), "bookmark", ["lecture_id"])

    op.create_table(
        "flashcard",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lecture_id", sa.String(length=36), sa.ForeignKey("lecture.id"), nullable=False),
        sa.Column("front", sa.Text(), nullable=False),
        sa.Column("back", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_flashcard_lecture_id"), "flashcard", ["lecture_id"])

    op.create_table(
        "quiz_attempt",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("lecture_id", sa.String(length=36), sa.ForeignKey("lecture.id"), nullable=True),
        sa.Column("is_correct", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("attempted_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_quiz_attempt_user_id"), "quiz_attempt", ["user_id"])
    op.create_index(op.f("ix_quiz_attempt_lecture_id"), "quiz_attempt", ["lecture_id"])

    op.create_table(
        "study_session",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("lecture_id", sa.String(length=36), sa.ForeignKey("lecture.id"), nullable=True),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_study_session_user_id"), "study_session", ["user_id"])
    op.create_index(op.f("ix_study_session_lecture_id"), "study_session", ["lecture_id"])
    op.create_index(op.f("ix_study_session_started_at"), "study_session", ["started_at"])


def downgrade() -> None:
    op.drop_table("study_session")
    op.drop_table("quiz_attempt")
    op.drop_table("flashcard")
    op.drop_table("bookmark")
