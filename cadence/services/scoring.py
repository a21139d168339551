"""
Read-side scoring: loads one StoreView and runs the engine against it.

Public API
----------
activity_metrics(db, activity_id, window_days, reference_date) -> ActivityMetrics
goal_metrics(db, goal_id, window_days, reference_date)         -> GoalMetrics
day_agenda(db, day)                                            -> DayAgenda
effective_config(db, activity_id, day)                         -> EffectiveConfig

Result types are plain dataclasses; routers turn them into responses.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from cadence.core.errors import ActivityNotFoundError
from cadence.engine.days import DayEvaluation, activities_for_day, evaluate_day
from cadence.engine.goals import (
    GoalConsistency,
    MetricTrend,
    consistency_breakdown,
    latest_metric_value,
    metric_progress,
    metric_trend,
)
from cadence.engine.rates import CompletionRate, completion_breakdown
from cadence.engine.resolver import EffectiveConfig, resolve_config
from cadence.engine.streaks import current_streak, longest_streak
from cadence.engine.types import ActivityRecord, GoalLinkRecord, GoalRecord, StoreView
from cadence.services.goals import get_goal
from cadence.services.store import load_goal_record, load_store_view

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class ActivityMetrics:
    activity: ActivityRecord
    reference_date: date
    window_days: int
    breakdown: Optional[CompletionRate]   # None: Sticky/Adhoc
    current_streak: int
    longest_streak: int


@dataclass
class MetricLinkProgress:
    link: GoalLinkRecord
    latest_value: Optional[float]
    progress: Optional[float]
    trend: Optional[MetricTrend]


@dataclass
class GoalMetrics:
    goal: GoalRecord
    is_paused: bool
    consistency: GoalConsistency
    metrics: list[MetricLinkProgress]


@dataclass
class AgendaItem:
    activity: ActivityRecord
    evaluation: DayEvaluation
    children: list[DayEvaluation]


@dataclass
class DayAgenda:
    day: date
    is_vacation: bool
    items: list[AgendaItem]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _require(view: StoreView, activity_id: int) -> ActivityRecord:
    activity = view.get(activity_id)
    if activity is None:
        raise ActivityNotFoundError(activity_id)
    return activity


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def activity_metrics(
    db: Session,
    activity_id: int,
    window_days: int,
    reference_date: date,
) -> ActivityMetrics:
    view = load_store_view(db)
    activity = _require(view, activity_id)
    return ActivityMetrics(
        activity=activity,
        reference_date=reference_date,
        window_days=window_days,
        breakdown=completion_breakdown(activity, window_days, view, reference_date),
        current_streak=current_streak(activity, view, reference_date),
        longest_streak=longest_streak(activity, view, reference_date),
    )


def goal_metrics(
    db: Session,
    goal_id: int,
    window_days: int,
    reference_date: date,
) -> GoalMetrics:
    goal = load_goal_record(db, get_goal(db, goal_id))
    view = load_store_view(db)

    consistency = consistency_breakdown(goal, window_days, view, reference_date)
    metrics = [
        MetricLinkProgress(
            link=link,
            latest_value=latest_metric_value(link.activity_id, view),
            progress=metric_progress(link, view),
            trend=metric_trend(link, view),
        )
        for link in goal.metric_links
    ]
    logger.debug(
        "Goal %s: consistency=%.3f over %d days ending %s",
        goal.id, consistency.score, window_days, reference_date,
    )
    return GoalMetrics(
        goal=goal,
        is_paused=goal.is_paused(reference_date),
        consistency=consistency,
        metrics=metrics,
    )


def day_agenda(db: Session, day: date) -> DayAgenda:
    view = load_store_view(db)
    items = []
    for ev in activities_for_day(view, day):
        activity = view.activities[ev.activity_id]
        children = [
            evaluate_day(view.activities[child_id], day, view)
            for child_id in ev.due_child_ids
        ]
        items.append(AgendaItem(activity=activity, evaluation=ev, children=children))
    return DayAgenda(day=day, is_vacation=view.is_vacation(day), items=items)


def effective_config(db: Session, activity_id: int, day: date) -> EffectiveConfig:
    view = load_store_view(db)
    return resolve_config(_require(view, activity_id), day)
