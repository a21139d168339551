"""
Goal and GoalActivity.

A goal aggregates activities through role-tagged links:
  "habit"  - weighted contribution to the consistency score
  "metric" - numeric progress from metric_baseline toward metric_target
"""
from datetime import datetime, date
from sqlalchemy import (
    Integer, String, Float, Boolean, DateTime, Date, Enum, func, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from cadence.db.base import Base
from cadence.engine.types import GoalRole, MetricDirection


class Goal(Base):
    __tablename__ = "goals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_manually_paused: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class GoalActivity(Base):
    __tablename__ = "goal_activities"
    __table_args__ = (
        UniqueConstraint("goal_id", "activity_id", "role", name="uq_goal_activity_role"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    goal_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    activity_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    role: Mapped[GoalRole] = mapped_column(
        Enum(GoalRole, name="goal_role_enum"),
        nullable=False,
        default=GoalRole.habit,
    )
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)

    # Metric role only
    metric_baseline: Mapped[float | None] = mapped_column(Float, nullable=True)
    metric_target: Mapped[float | None] = mapped_column(Float, nullable=True)
    metric_direction: Mapped[MetricDirection | None] = mapped_column(
        Enum(MetricDirection, name="metric_direction_enum"), nullable=True,
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
