"""
Goal schemas.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from cadence.engine.types import GoalRole, MetricDirection


class GoalCreate(BaseModel):
    title: str = Field(min_length=1, max_length=256, examples=["Run a half marathon"])
    deadline: Optional[date] = None
    is_manually_paused: bool = False
    sort_order: int = 0


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=256)
    deadline: Optional[date] = None
    is_manually_paused: Optional[bool] = None
    sort_order: Optional[int] = None


class GoalLinkCreate(BaseModel):
    activity_id: int
    role: GoalRole = GoalRole.habit
    weight: float = Field(default=1.0, ge=0)
    metric_baseline: Optional[float] = None
    metric_target: Optional[float] = None
    metric_direction: Optional[MetricDirection] = None
    sort_order: int = 0


class GoalLinkUpdate(BaseModel):
    weight: Optional[float] = Field(default=None, ge=0)
    metric_baseline: Optional[float] = None
    metric_target: Optional[float] = None
    metric_direction: Optional[MetricDirection] = None
    sort_order: Optional[int] = None


class GoalLinkResponse(BaseModel):
    id: int
    goal_id: int
    activity_id: int
    role: GoalRole
    weight: float
    metric_baseline: Optional[float] = None
    metric_target: Optional[float] = None
    metric_direction: Optional[MetricDirection] = None
    sort_order: int


class GoalResponse(BaseModel):
    id: int
    title: str
    deadline: Optional[str] = None
    is_manually_paused: bool
    sort_order: int
    links: list[GoalLinkResponse] = Field(default_factory=list)
