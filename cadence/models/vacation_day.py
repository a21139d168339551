from datetime import datetime, date
from sqlalchemy import Integer, DateTime, Date, func
from sqlalchemy.orm import Mapped, mapped_column

from cadence.db.base import Base


class VacationDay(Base):
    """A day on which no activity counts as scheduled."""
    __tablename__ = "vacation_days"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    day: Mapped[date] = mapped_column(Date, nullable=False, unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
