"""
Completion rate over a trailing window.

For each of the `window_days` calendar days ending on `reference_date`
(inclusive), the activity's configuration for that day is resolved and the
day is classified:

  not due            → ignored (neither numerator nor denominator)
  due, completed     → counts in both
  due, skipped/missed → counts in the denominator only

rate = completed / due, or 0.0 when nothing was due in the window.

Sticky and Adhoc leaves have no rate: the public functions return None
("not applicable") for them. A day whose *historical* schedule was Sticky or
Adhoc is ignored inside an otherwise recurring activity's window.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from cadence.engine.days import DayEvaluation, evaluate_day
from cadence.engine.types import ActivityKind, ActivityRecord, StoreView
from cadence.schemas.schedule import ONE_SHOT_SCHEDULES


@dataclass(frozen=True)
class CompletionRate:
    activity_id: int
    reference_date: date     # last day of the window
    window_days: int
    rate: float              # 0.0 – 1.0
    due_days: int
    completed_days: int
    skipped_days: int
    days: list[DayEvaluation]  # oldest → newest, every day in the window


def window(reference_date: date, window_days: int) -> list[date]:
    """The `window_days` days ending on `reference_date`, oldest first."""
    return [reference_date - timedelta(days=i) for i in range(window_days - 1, -1, -1)]


def is_rate_applicable(activity: ActivityRecord) -> bool:
    # A container is due through its children; its own schedule is unused.
    if activity.kind == ActivityKind.container:
        return True
    return not isinstance(activity.schedule, ONE_SHOT_SCHEDULES)


def counts_toward_rate(evaluation: DayEvaluation) -> bool:
    if not evaluation.scheduled:
        return False
    if evaluation.config.is_container:
        return True
    return not isinstance(evaluation.config.schedule, ONE_SHOT_SCHEDULES)


def completion_breakdown(
    activity: ActivityRecord,
    window_days: int,
    view: StoreView,
    reference_date: date,
) -> Optional[CompletionRate]:
    """Full per-day breakdown behind `completion_rate`; None if not applicable."""
    if not is_rate_applicable(activity):
        return None

    days = [evaluate_day(activity, d, view) for d in window(reference_date, window_days)]
    counted = [ev for ev in days if counts_toward_rate(ev)]
    due = len(counted)
    completed = sum(1 for ev in counted if ev.completed)
    skipped = sum(1 for ev in counted if ev.skipped)

    return CompletionRate(
        activity_id=activity.id,
        reference_date=reference_date,
        window_days=window_days,
        rate=completed / due if due else 0.0,
        due_days=due,
        completed_days=completed,
        skipped_days=skipped,
        days=days,
    )


def completion_rate(
    activity: ActivityRecord,
    window_days: int,
    view: StoreView,
    reference_date: date,
) -> Optional[float]:
    """Adherence ratio in [0, 1], or None for Sticky/Adhoc activities."""
    breakdown = completion_breakdown(activity, window_days, view, reference_date)
    return breakdown.rate if breakdown is not None else None
