"""
Recurrence rules.

`Schedule` is a closed tagged union keyed on `type`. The same models are
used by the API, persisted as JSON in `activities.schedule_data` /
`activity_config_snapshots.schedule_data`, and evaluated by
`cadence.engine.evaluator.is_due`.

Weekdays are ISO numbers (1 = Monday … 7 = Sunday).
"""
from __future__ import annotations

import enum
import logging
from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


class TimeSlot(str, enum.Enum):
    all_day = "all_day"
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"


class TimeWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    slot: TimeSlot
    custom_start_hour: Optional[int] = Field(default=None, ge=0, le=23)
    custom_end_hour: Optional[int] = Field(default=None, ge=1, le=24)


class _ScheduleBase(BaseModel):
    # Time-of-day refinements. They never change day-level due-ness.
    model_config = ConfigDict(frozen=True)

    time_window: Optional[TimeWindow] = None
    time_slots: tuple[TimeSlot, ...] = Field(
        default=(),
        description="Multi-session slots; empty for single-session activities.",
    )

    @property
    def sessions_per_day(self) -> int:
        return max(len(self.time_slots), 1)


class DailySchedule(_ScheduleBase):
    type: Literal["daily"] = "daily"


class WeeklySchedule(_ScheduleBase):
    type: Literal["weekly"] = "weekly"
    weekdays: frozenset[Annotated[int, Field(ge=1, le=7)]] = Field(min_length=1)


class IntervalSchedule(_ScheduleBase):
    type: Literal["interval"] = "interval"
    every_n_days: int = Field(ge=1)
    anchor_date: date


class MonthlySchedule(_ScheduleBase):
    type: Literal["monthly"] = "monthly"
    month_days: frozenset[Annotated[int, Field(ge=1, le=31)]] = Field(min_length=1)


class StickySchedule(_ScheduleBase):
    """Due every day until the activity is stopped."""
    type: Literal["sticky"] = "sticky"


class AdhocSchedule(_ScheduleBase):
    """Due exactly once."""
    type: Literal["adhoc"] = "adhoc"
    specific_date: date


Schedule = Annotated[
    Union[
        DailySchedule,
        WeeklySchedule,
        IntervalSchedule,
        MonthlySchedule,
        StickySchedule,
        AdhocSchedule,
    ],
    Field(discriminator="type"),
]

# Schedules with no calendar recurrence: they have no window-based rate.
ONE_SHOT_SCHEDULES = (StickySchedule, AdhocSchedule)

SCHEDULE_ADAPTER: TypeAdapter = TypeAdapter(Schedule)


def parse_schedule(raw: Optional[str]) -> Schedule:
    """Decode a stored schedule; missing or unreadable data reads as daily."""
    if not raw:
        return DailySchedule()
    try:
        return SCHEDULE_ADAPTER.validate_json(raw)
    except ValidationError:
        logger.warning("Unreadable schedule_data %r, treating as daily", raw)
        return DailySchedule()


def dump_schedule(schedule: Schedule) -> str:
    return SCHEDULE_ADAPTER.dump_json(schedule).decode()
