"""
ActivityConfigSnapshot - the configuration an activity had before a
structural change, valid for [effective_from, effective_until] (inclusive).

Append-only. Written once by the change that produced it; removed only when
the owning activity is deleted. Ranges of one activity never overlap
(enforced in cadence/services/activities.py).
"""
from datetime import datetime, date
from sqlalchemy import Integer, String, Text, Float, DateTime, Date, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from cadence.db.base import Base
from cadence.engine.types import ActivityKind, MetricKind
from cadence.schemas.schedule import Schedule, parse_schedule


class ActivityConfigSnapshot(Base):
    __tablename__ = "activity_config_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    activity_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_until: Mapped[date] = mapped_column(Date, nullable=False)

    # Captured configuration
    kind: Mapped[ActivityKind] = mapped_column(
        Enum(ActivityKind, name="activity_kind_enum"), nullable=False,
    )
    schedule_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    metric_kind: Mapped[MetricKind | None] = mapped_column(
        Enum(MetricKind, name="metric_kind_enum"), nullable=True,
    )
    target_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    unit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    parent_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True,
        comment="Container the activity belonged to during this period",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    @property
    def schedule(self) -> Schedule:
        return parse_schedule(self.schedule_data)
