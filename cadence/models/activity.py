"""
Activity - a trackable item and its *current* configuration.

Historical configurations live in `activity_config_snapshots`; the engine
consults those first (see cadence/engine/resolver.py).

schedule_data: JSON-encoded Schedule (see cadence/schemas/schedule.py).
parent_id:     owning container, or NULL for top-level activities. Not a
               foreign key: a dangling id reads as "not a member".
"""
from datetime import datetime, date
from sqlalchemy import Integer, String, Text, Float, DateTime, Date, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from cadence.db.base import Base
from cadence.engine.types import ActivityKind, MetricKind
from cadence.schemas.schedule import Schedule, dump_schedule, parse_schedule


class Activity(Base):
    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    kind: Mapped[ActivityKind] = mapped_column(
        Enum(ActivityKind, name="activity_kind_enum"),
        nullable=False,
        default=ActivityKind.checkbox,
    )
    schedule_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    metric_kind: Mapped[MetricKind | None] = mapped_column(
        Enum(MetricKind, name="metric_kind_enum"), nullable=True,
    )
    target_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    unit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_date: Mapped[date] = mapped_column(Date, nullable=False)
    stopped_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    parent_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    @property
    def schedule(self) -> Schedule:
        return parse_schedule(self.schedule_data)

    @schedule.setter
    def schedule(self, value: Schedule) -> None:
        self.schedule_data = dump_schedule(value)

    @property
    def is_container(self) -> bool:
        return self.kind == ActivityKind.container
