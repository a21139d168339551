"""initial schema

Revision ID: 0001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVITY_KINDS = ("checkbox", "value", "cumulative", "metric", "container")
METRIC_KINDS = ("value", "checkbox", "photo")


def upgrade() -> None:
    # --- ENUM types ---
    sa.Enum(*ACTIVITY_KINDS, name="activity_kind_enum").create(op.get_bind(), checkfirst=True)
    sa.Enum(*METRIC_KINDS, name="metric_kind_enum").create(op.get_bind(), checkfirst=True)
    sa.Enum("completed", "skipped", name="log_status_enum").create(op.get_bind(), checkfirst=True)
    sa.Enum("habit", "metric", name="goal_role_enum").create(op.get_bind(), checkfirst=True)
    sa.Enum("increase", "decrease", name="metric_direction_enum").create(
        op.get_bind(), checkfirst=True
    )

    # --- activities ---
    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("kind", sa.Enum(
            *ACTIVITY_KINDS, name="activity_kind_enum", create_type=False,
        ), nullable=False),
        sa.Column("schedule_data", sa.Text(), nullable=True),
        sa.Column("metric_kind", sa.Enum(
            *METRIC_KINDS, name="metric_kind_enum", create_type=False,
        ), nullable=True),
        sa.Column("target_value", sa.Float(), nullable=True),
        sa.Column("unit", sa.String(32), nullable=True),
        sa.Column("created_date", sa.Date(), nullable=False),
        sa.Column("stopped_at", sa.Date(), nullable=True),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activities_id", "activities", ["id"])
    op.create_index("ix_activities_parent_id", "activities", ["parent_id"])

    # --- activity_config_snapshots ---
    op.create_table(
        "activity_config_snapshots",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("activity_id", sa.Integer(), nullable=False),
        sa.Column("effective_from", sa.Date(), nullable=False),
        sa.Column("effective_until", sa.Date(), nullable=False),
        sa.Column("kind", sa.Enum(
            *ACTIVITY_KINDS, name="activity_kind_enum", create_type=False,
        ), nullable=False),
        sa.Column("schedule_data", sa.Text(), nullable=True),
        sa.Column("metric_kind", sa.Enum(
            *METRIC_KINDS, name="metric_kind_enum", create_type=False,
        ), nullable=True),
        sa.Column("target_value", sa.Float(), nullable=True),
        sa.Column("unit", sa.String(32), nullable=True),
        sa.Column("parent_id", sa.Integer(), nullable=True,
                  comment="Container the activity belonged to during this period"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activity_config_snapshots_id", "activity_config_snapshots", ["id"])
    op.create_index(
        "ix_activity_config_snapshots_activity_id", "activity_config_snapshots", ["activity_id"]
    )

    # --- activity_logs ---
    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("activity_id", sa.Integer(), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("status", sa.Enum(
            "completed", "skipped", name="log_status_enum", create_type=False,
        ), nullable=False),
        sa.Column("value", sa.Float(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("skip_reason", sa.String(256), nullable=True),
        sa.Column("media_ref", sa.String(256), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("activity_id", "day", name="uq_activity_log_activity_day"),
    )
    op.create_index("ix_activity_logs_id", "activity_logs", ["id"])
    op.create_index("ix_activity_logs_activity_id", "activity_logs", ["activity_id"])
    op.create_index("ix_activity_logs_day", "activity_logs", ["day"])

    # --- vacation_days ---
    op.create_table(
        "vacation_days",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_vacation_days_id", "vacation_days", ["id"])
    op.create_index("ix_vacation_days_day", "vacation_days", ["day"], unique=True)

    # --- goals ---
    op.create_table(
        "goals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("is_manually_paused", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_goals_id", "goals", ["id"])

    # --- goal_activities ---
    op.create_table(
        "goal_activities",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("goal_id", sa.Integer(), nullable=False),
        sa.Column("activity_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.Enum(
            "habit", "metric", name="goal_role_enum", create_type=False,
        ), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False, server_default="1.0"),
        sa.Column("metric_baseline", sa.Float(), nullable=True),
        sa.Column("metric_target", sa.Float(), nullable=True),
        sa.Column("metric_direction", sa.Enum(
            "increase", "decrease", name="metric_direction_enum", create_type=False,
        ), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("goal_id", "activity_id", "role", name="uq_goal_activity_role"),
    )
    op.create_index("ix_goal_activities_id", "goal_activities", ["id"])
    op.create_index("ix_goal_activities_goal_id", "goal_activities", ["goal_id"])
    op.create_index("ix_goal_activities_activity_id", "goal_activities", ["activity_id"])


def downgrade() -> None:
    op.drop_table("goal_activities")
    op.drop_table("goals")
    op.drop_table("vacation_days")
    op.drop_table("activity_logs")
    op.drop_table("activity_config_snapshots")
    op.drop_table("activities")

    op.execute("DROP TYPE IF EXISTS metric_direction_enum")
    op.execute("DROP TYPE IF EXISTS goal_role_enum")
    op.execute("DROP TYPE IF EXISTS log_status_enum")
    op.execute("DROP TYPE IF EXISTS metric_kind_enum")
    op.execute("DROP TYPE IF EXISTS activity_kind_enum")
