"""
Metrics schemas.

GET /metrics/activities/{id} → ActivityMetricsResponse
GET /metrics/goals/{id}      → GoalMetricsResponse
GET /metrics/day             → DayAgendaResponse
"""
from typing import Optional

from pydantic import BaseModel, Field

from cadence.engine.types import ActivityKind


class DayEvaluationResponse(BaseModel):
    """How one activity stood on one day."""
    day: str
    kind: ActivityKind = Field(description="Kind in force on that day.")
    scheduled: bool
    completed: bool
    skipped: bool
    exempt_reason: Optional[str] = Field(
        default=None,
        description="vacation | not_created | stopped when the day was exempt.",
    )
    snapshot_id: Optional[int] = None
    due_child_ids: list[int] = Field(default_factory=list)


class ActivityMetricsResponse(BaseModel):
    activity_id: int
    reference_date: str = Field(description="Last day (inclusive) of the window.")
    window_days: int
    rate_applicable: bool = Field(
        description="False for sticky and adhoc activities, which have no rate."
    )
    completion_rate: Optional[float] = Field(
        default=None, description="Range: 0.0–1.0.", examples=[0.7]
    )
    due_days: int = 0
    completed_days: int = 0
    skipped_days: int = 0
    current_streak: int
    longest_streak: int
    days: list[DayEvaluationResponse] = Field(
        default_factory=list, description="Per-day breakdown, oldest first."
    )


class HabitContributionResponse(BaseModel):
    link_id: int
    activity_id: int
    weight: float
    completion_rate: Optional[float] = None
    eligible: bool


class MetricTrendResponse(BaseModel):
    latest_value: float
    delta_from_baseline: float
    rate: float
    rate_unit: str = Field(examples=["week"])
    is_improving: bool


class MetricProgressResponse(BaseModel):
    link_id: int
    activity_id: int
    metric_baseline: Optional[float] = None
    metric_target: Optional[float] = None
    latest_value: Optional[float] = None
    progress: Optional[float] = Field(
        default=None, description="Clamped to 0.0–1.0; null when not computable."
    )
    trend: Optional[MetricTrendResponse] = None


class GoalMetricsResponse(BaseModel):
    goal_id: int
    title: str
    reference_date: str
    window_days: int
    is_paused: bool
    consistency_score: float = Field(description="Range: 0.0–1.0.", examples=[0.5])
    habits: list[HabitContributionResponse]
    metrics: list[MetricProgressResponse]


class AgendaItemResponse(BaseModel):
    activity_id: int
    name: str
    evaluation: DayEvaluationResponse
    children: list[DayEvaluationResponse] = Field(default_factory=list)


class DayAgendaResponse(BaseModel):
    day: str
    is_vacation: bool
    items: list[AgendaItemResponse]
