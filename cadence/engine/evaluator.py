"""
Schedule evaluator.

`is_due` classifies a calendar day against a recurrence rule, independent of
completion. `exemption` implements the wrapping rule every caller applies
first: vacation days, days before `created_date` and days after
`stopped_at` are never due, whatever the schedule says.
"""
from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable, Optional

from cadence.engine.resolver import resolve_config
from cadence.engine.types import ActivityRecord, StoreView
from cadence.schemas.schedule import (
    AdhocSchedule,
    DailySchedule,
    IntervalSchedule,
    MonthlySchedule,
    Schedule,
    StickySchedule,
    WeeklySchedule,
)


class Exemption:
    VACATION    = "vacation"
    NOT_CREATED = "not_created"
    STOPPED     = "stopped"


# ---------------------------------------------------------------------------
# Schedule rules
# ---------------------------------------------------------------------------

def _monthly_due(schedule: MonthlySchedule, day: date) -> bool:
    # Days past the end of a short month fall on its last day.
    last = calendar.monthrange(day.year, day.month)[1]
    if day.day in schedule.month_days:
        return True
    return day.day == last and any(d > last for d in schedule.month_days)


def is_due(schedule: Schedule, day: date) -> bool:
    """Whether `schedule` expects the activity on `day`."""
    if isinstance(schedule, DailySchedule):
        return True
    if isinstance(schedule, WeeklySchedule):
        return day.isoweekday() in schedule.weekdays
    if isinstance(schedule, IntervalSchedule):
        if day < schedule.anchor_date:
            return False
        return (day - schedule.anchor_date).days % schedule.every_n_days == 0
    if isinstance(schedule, MonthlySchedule):
        return _monthly_due(schedule, day)
    if isinstance(schedule, StickySchedule):
        # Completion is expressed by stopping the activity.
        return True
    if isinstance(schedule, AdhocSchedule):
        return day == schedule.specific_date
    raise TypeError(f"Unknown schedule type: {type(schedule).__name__}")


# ---------------------------------------------------------------------------
# Wrapping rule
# ---------------------------------------------------------------------------

def exemption(
    activity: ActivityRecord,
    day: date,
    vacation_days: Iterable[date],
) -> Optional[str]:
    """Return why `day` can't be due for `activity`, or None."""
    if day in vacation_days:
        return Exemption.VACATION
    if day < activity.created_date:
        return Exemption.NOT_CREATED
    if activity.stopped_at is not None and day > activity.stopped_at:
        return Exemption.STOPPED
    return None


def is_leaf_due(activity: ActivityRecord, day: date, view: StoreView) -> bool:
    """Wrapping rule, then the schedule that was in effect on `day`."""
    if exemption(activity, day, view.vacation_days) is not None:
        return False
    return is_due(resolve_config(activity, day).schedule, day)
