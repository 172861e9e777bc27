"""Initial schema — activities and laps.

Revision ID: 001_activities_and_laps
Revises: None
Create Date: 2026-10-18

laps.activity_id cascades on delete so removing an activity removes its laps
in the same statement.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_activities_and_laps"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "activities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("name", name="uq_activities_name"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "laps",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "activity_id", sa.Integer,
            sa.ForeignKey("activities.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("recorded_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sqlite_autoincrement=True,
    )
    op.create_index(
        "ix_laps_activity_recorded", "laps", ["activity_id", "recorded_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_laps_activity_recorded", table_name="laps")
    op.drop_table("laps")
    op.drop_table("activities")
