"""
Goal scoring.

consistency_score(goal, window_days, view, reference_date) -> float
    Weighted mean of the completion rates of the goal's habit links.
    Links whose activity no longer exists, or whose activity has no rate
    (Sticky/Adhoc), are left out of numerator and denominator. With no
    eligible weight the score is 0.0.

metric_progress(link, view) -> float | None
    (latest - baseline) / (target - baseline), clamped to [0, 1]. The target
    already encodes the direction (a "decrease" goal has target < baseline),
    so the formula is the same for both directions.

metric_trend(link, view) -> MetricTrend | None
    Average rate of change since the baseline, for display. This is the only
    place `metric_direction` matters.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from cadence.engine.rates import completion_rate
from cadence.engine.types import (
    GoalLinkRecord,
    GoalRecord,
    LogRecord,
    LogStatus,
    MetricDirection,
    StoreView,
)

# |target - baseline| at or below this is a degenerate metric link.
MIN_METRIC_SPAN = 0.001

# Span thresholds (days) for picking the trend's display unit.
_WEEKLY_UNIT_FROM = 14
_MONTHLY_UNIT_FROM = 90
_DAYS_PER_MONTH = 30.44


@dataclass(frozen=True)
class HabitContribution:
    link_id: int
    activity_id: int
    weight: float
    rate: Optional[float]    # None: activity missing or not applicable
    eligible: bool


@dataclass(frozen=True)
class GoalConsistency:
    goal_id: int
    reference_date: date
    window_days: int
    score: float             # 0.0 – 1.0
    eligible_weight: float
    contributions: list[HabitContribution]


@dataclass(frozen=True)
class MetricTrend:
    latest_value: float
    delta_from_baseline: float
    rate: float              # change per `rate_unit`
    rate_unit: str           # "day" | "week" | "month"
    is_improving: bool


# ---------------------------------------------------------------------------
# Habit links - consistency
# ---------------------------------------------------------------------------

def consistency_breakdown(
    goal: GoalRecord,
    window_days: int,
    view: StoreView,
    reference_date: date,
) -> GoalConsistency:
    contributions: list[HabitContribution] = []
    weighted_sum = 0.0
    total_weight = 0.0

    for link in goal.habit_links:
        activity = view.get(link.activity_id)
        rate = None
        if activity is not None:
            rate = completion_rate(activity, window_days, view, reference_date)
        eligible = rate is not None
        if eligible:
            weighted_sum += rate * link.weight
            total_weight += link.weight
        contributions.append(HabitContribution(
            link_id=link.id,
            activity_id=link.activity_id,
            weight=link.weight,
            rate=rate,
            eligible=eligible,
        ))

    score = weighted_sum / total_weight if total_weight > 0 else 0.0
    return GoalConsistency(
        goal_id=goal.id,
        reference_date=reference_date,
        window_days=window_days,
        score=score,
        eligible_weight=total_weight,
        contributions=contributions,
    )


def consistency_score(
    goal: GoalRecord,
    window_days: int,
    view: StoreView,
    reference_date: date,
) -> float:
    return consistency_breakdown(goal, window_days, view, reference_date).score


# ---------------------------------------------------------------------------
# Metric links - progress
# ---------------------------------------------------------------------------

def _numeric_completed_logs(activity_id: int, view: StoreView) -> list[LogRecord]:
    return [
        log for log in view.logs_for(activity_id)
        if log.status == LogStatus.completed and log.value is not None
    ]


def latest_metric_value(activity_id: int, view: StoreView) -> Optional[float]:
    """Value of the most recent Completed log that carries a number."""
    logs = _numeric_completed_logs(activity_id, view)
    return logs[-1].value if logs else None


def _has_usable_span(link: GoalLinkRecord) -> bool:
    if link.metric_baseline is None or link.metric_target is None:
        return False
    return abs(link.metric_target - link.metric_baseline) > MIN_METRIC_SPAN


def metric_progress(link: GoalLinkRecord, view: StoreView) -> Optional[float]:
    if not _has_usable_span(link) or view.get(link.activity_id) is None:
        return None
    latest = latest_metric_value(link.activity_id, view)
    if latest is None:
        return None
    raw = (latest - link.metric_baseline) / (link.metric_target - link.metric_baseline)
    return min(max(raw, 0.0), 1.0)


def metric_trend(link: GoalLinkRecord, view: StoreView) -> Optional[MetricTrend]:
    """Needs at least two numeric logs; measured from the baseline (or first value)."""
    if view.get(link.activity_id) is None:
        return None
    logs = _numeric_completed_logs(link.activity_id, view)
    if len(logs) < 2:
        return None

    first, last = logs[0], logs[-1]
    span = max((last.day - first.day).days, 1)
    origin = link.metric_baseline if link.metric_baseline is not None else first.value
    delta = last.value - origin

    if span < _WEEKLY_UNIT_FROM:
        rate, unit = delta / span, "day"
    elif span < _MONTHLY_UNIT_FROM:
        rate, unit = delta / (span / 7.0), "week"
    else:
        rate, unit = delta / (span / _DAYS_PER_MONTH), "month"

    direction = link.metric_direction or MetricDirection.increase
    is_improving = rate > 0 if direction == MetricDirection.increase else rate < 0
    return MetricTrend(
        latest_value=last.value,
        delta_from_baseline=delta,
        rate=rate,
        rate_unit=unit,
        is_improving=is_improving,
    )
