"""
Streaks: runs of consecutive completed due days.

Days that are not due (schedule, vacation, lifetime) and days that were
explicitly skipped pass through without breaking a run. A due day with no
Completed log breaks it. For the current streak, an uncompleted
`reference_date` is treated as still open rather than missed.
"""
from __future__ import annotations

from datetime import date, timedelta

from cadence.engine.days import evaluate_day
from cadence.engine.rates import counts_toward_rate, is_rate_applicable
from cadence.engine.types import ActivityRecord, StoreView

MAX_LOOKBACK_DAYS = 3650


def current_streak(
    activity: ActivityRecord,
    view: StoreView,
    reference_date: date,
    max_lookback_days: int = MAX_LOOKBACK_DAYS,
) -> int:
    if not is_rate_applicable(activity):
        return 0

    day = reference_date
    if not evaluate_day(activity, day, view).completed:
        day -= timedelta(days=1)

    streak = 0
    earliest = max(activity.created_date, reference_date - timedelta(days=max_lookback_days))
    while day >= earliest:
        ev = evaluate_day(activity, day, view)
        if not counts_toward_rate(ev) or ev.skipped:
            pass
        elif ev.completed:
            streak += 1
        else:
            break
        day -= timedelta(days=1)
    return streak


def longest_streak(
    activity: ActivityRecord,
    view: StoreView,
    reference_date: date,
    max_lookback_days: int = MAX_LOOKBACK_DAYS,
) -> int:
    if not is_rate_applicable(activity):
        return 0

    best = 0
    run = 0
    day = max(activity.created_date, reference_date - timedelta(days=max_lookback_days))
    while day <= reference_date:
        ev = evaluate_day(activity, day, view)
        if not counts_toward_rate(ev) or ev.skipped:
            pass
        elif ev.completed:
            run += 1
            best = max(best, run)
        elif day < reference_date:
            run = 0
        day += timedelta(days=1)
    return best
