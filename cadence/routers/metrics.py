"""
Metrics router - completion rates, streaks, goal scores and the day agenda.

GET /metrics/activities/{id}   - completion rate over a window + streaks
GET /metrics/goals/{id}        - consistency score + metric progress
GET /metrics/day               - top-level activities due on a day

Every number in one response is computed from a single read of the store.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cadence.core.config import settings
from cadence.db.base import get_db
from cadence.engine.days import DayEvaluation
from cadence.schemas.common import ErrorResponse
from cadence.schemas.metrics import (
    ActivityMetricsResponse,
    AgendaItemResponse,
    DayAgendaResponse,
    DayEvaluationResponse,
    GoalMetricsResponse,
    HabitContributionResponse,
    MetricProgressResponse,
    MetricTrendResponse,
)
from cadence.services.scoring import (
    ActivityMetrics,
    GoalMetrics,
    MetricLinkProgress,
    activity_metrics,
    day_agenda,
    goal_metrics,
)

router = APIRouter(prefix="/metrics", tags=["metrics"])


def _window_days(
    window_days: int = Query(
        default=settings.DEFAULT_WINDOW_DAYS,
        ge=1,
        le=settings.MAX_WINDOW_DAYS,
        description="Number of days in the window, ending on reference_date.",
        examples=[14],
    ),
) -> int:
    return window_days


def _reference_date(
    reference_date: Optional[date] = Query(
        default=None,
        description="Last day (inclusive) of the window. Defaults to today.",
        examples=["2024-03-15"],
    ),
) -> date:
    return reference_date or date.today()


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _day_to_response(ev: DayEvaluation) -> DayEvaluationResponse:
    return DayEvaluationResponse(
        day=str(ev.day),
        kind=ev.config.kind,
        scheduled=ev.scheduled,
        completed=ev.completed,
        skipped=ev.skipped,
        exempt_reason=ev.exempt_reason,
        snapshot_id=ev.config.snapshot_id,
        due_child_ids=list(ev.due_child_ids),
    )


def _activity_to_response(m: ActivityMetrics) -> ActivityMetricsResponse:
    b = m.breakdown
    return ActivityMetricsResponse(
        activity_id=m.activity.id,
        reference_date=str(m.reference_date),
        window_days=m.window_days,
        rate_applicable=b is not None,
        completion_rate=b.rate if b else None,
        due_days=b.due_days if b else 0,
        completed_days=b.completed_days if b else 0,
        skipped_days=b.skipped_days if b else 0,
        current_streak=m.current_streak,
        longest_streak=m.longest_streak,
        days=[_day_to_response(ev) for ev in b.days] if b else [],
    )


def _metric_to_response(p: MetricLinkProgress) -> MetricProgressResponse:
    trend = None
    if p.trend is not None:
        trend = MetricTrendResponse(
            latest_value=p.trend.latest_value,
            delta_from_baseline=p.trend.delta_from_baseline,
            rate=p.trend.rate,
            rate_unit=p.trend.rate_unit,
            is_improving=p.trend.is_improving,
        )
    return MetricProgressResponse(
        link_id=p.link.id,
        activity_id=p.link.activity_id,
        metric_baseline=p.link.metric_baseline,
        metric_target=p.link.metric_target,
        latest_value=p.latest_value,
        progress=p.progress,
        trend=trend,
    )


def _goal_to_response(m: GoalMetrics) -> GoalMetricsResponse:
    c = m.consistency
    return GoalMetricsResponse(
        goal_id=m.goal.id,
        title=m.goal.title,
        reference_date=str(c.reference_date),
        window_days=c.window_days,
        is_paused=m.is_paused,
        consistency_score=float(c.score),
        habits=[
            HabitContributionResponse(
                link_id=h.link_id,
                activity_id=h.activity_id,
                weight=h.weight,
                completion_rate=h.rate,
                eligible=h.eligible,
            )
            for h in c.contributions
        ],
        metrics=[_metric_to_response(p) for p in m.metrics],
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/activities/{activity_id}",
    response_model=ActivityMetricsResponse,
    summary="Completion rate and streaks for one activity",
    responses={404: {"model": ErrorResponse, "description": "Activity not found."}},
)
def activity(
    activity_id: int,
    window_days: int = Depends(_window_days),
    reference_date: date = Depends(_reference_date),
    db: Session = Depends(get_db),
):
    """
    For each day of the window the configuration in force that day decides
    whether the activity was due. Vacation days, days before creation and
    days after stopping are never due.

    `completion_rate` is completed due days over all due days (0.0 when
    nothing was due). Sticky and adhoc activities have no rate:
    `rate_applicable` is false and `completion_rate` is null.
    """
    return _activity_to_response(
        activity_metrics(db, activity_id, window_days, reference_date)
    )


@router.get(
    "/goals/{goal_id}",
    response_model=GoalMetricsResponse,
    summary="Consistency score and metric progress for one goal",
    responses={404: {"model": ErrorResponse, "description": "Goal not found."}},
)
def goal(
    goal_id: int,
    window_days: int = Depends(_window_days),
    reference_date: date = Depends(_reference_date),
    db: Session = Depends(get_db),
):
    """
    `consistency_score` is the weighted mean of the completion rates of the
    goal's habit links; links without a rate are left out. Metric links
    report progress from baseline toward target, clamped to 0.0–1.0.
    """
    return _goal_to_response(goal_metrics(db, goal_id, window_days, reference_date))


@router.get(
    "/day",
    response_model=DayAgendaResponse,
    summary="Activities due on a day",
)
def day(
    day: Optional[date] = Query(
        default=None, description="Day to evaluate. Defaults to today.", examples=["2024-03-15"]
    ),
    db: Session = Depends(get_db),
):
    agenda = day_agenda(db, day or date.today())
    return DayAgendaResponse(
        day=str(agenda.day),
        is_vacation=agenda.is_vacation,
        items=[
            AgendaItemResponse(
                activity_id=item.activity.id,
                name=item.activity.name,
                evaluation=_day_to_response(item.evaluation),
                children=[_day_to_response(ev) for ev in item.children],
            )
            for item in agenda.items
        ],
    )
