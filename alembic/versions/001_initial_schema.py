"""Initial schema — teams, questions, rounds, assignments, countdowns, event_state.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "teams",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("name_key", sa.String(100), nullable=False, unique=True),
        sa.Column("round_number", sa.Integer, nullable=False, server_default="1"),
        sa.Column("has_spun", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("assigned_question_id", sa.String(64), nullable=True),
        sa.Column("marks", sa.Integer, nullable=True),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_teams_round_number", "teams", ["round_number"])

    op.create_table(
        "questions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("round_number", sa.Integer, nullable=False),
        sa.Column("prompt", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("is_locked", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("assigned_team_id", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_questions_round_number", "questions", ["round_number"])

    op.create_table(
        "rounds",
        sa.Column("number", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("max_teams", sa.Integer, nullable=False),
    )

    op.create_table(
        "assignments",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("team_id", sa.String(64), sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("question_id", sa.String(64), sa.ForeignKey("questions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("round_number", sa.Integer, nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("released_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "uq_assignments_held_question", "assignments", ["question_id"],
        unique=True,
        sqlite_where=sa.text("released_at IS NULL"),
        postgresql_where=sa.text("released_at IS NULL"),
    )
    op.create_index(
        "uq_assignments_held_team_round", "assignments", ["team_id", "round_number"],
        unique=True,
        sqlite_where=sa.text("released_at IS NULL"),
        postgresql_where=sa.text("released_at IS NULL"),
    )

    op.create_table(
        "countdowns",
        sa.Column("round_number", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration_seconds", sa.Integer, nullable=False, server_default="3"),
    )

    op.create_table(
        "event_state",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("current_round", sa.Integer, nullable=False, server_default="1"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("event_state")
    op.drop_table("countdowns")
    op.drop_index("uq_assignments_held_team_round", table_name="assignments")
    op.drop_index("uq_assignments_held_question", table_name="assignments")
    op.drop_table("assignments")
    op.drop_table("rounds")
    op.drop_index("ix_questions_round_number", table_name="questions")
    op.drop_table("questions")
    op.drop_index("ix_teams_round_number", table_name="teams")
    op.drop_table("teams")
