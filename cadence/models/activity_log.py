from datetime import datetime, date
from sqlalchemy import Integer, String, Text, Float, DateTime, Date, Enum, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cadence.db.base import Base
from cadence.engine.types import LogStatus


class ActivityLog(Base):
    """One recorded outcome per (activity, day). A missing row means missed."""
    __tablename__ = "activity_logs"
    __table_args__ = (
        UniqueConstraint("activity_id", "day", name="uq_activity_log_activity_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    activity_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[LogStatus] = mapped_column(
        Enum(LogStatus, name="log_status_enum"),
        nullable=False,
        default=LogStatus.completed,
    )
    value: Mapped[float | None] = mapped_column(Float, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    skip_reason: Mapped[str | None] = mapped_column(String(256), nullable=True)
    media_ref: Mapped[str | None] = mapped_column(String(256), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
