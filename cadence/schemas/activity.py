"""
Activity schemas.

POST   /activities                         → ActivityCreate   → ActivityResponse
PATCH  /activities/{id}                    → ActivityUpdate   → ActivityResponse
POST   /activities/{id}/stop               → StopRequest      → ActivityResponse
PUT    /activities/{id}/parent             → ParentRequest    → ActivityResponse
POST   /activities/{id}/convert-to-container → ConvertRequest → ActivityResponse
POST   /activities/{id}/dissolve           → DissolveRequest  → ActivityResponse
GET    /activities/{id}/snapshots          → list[SnapshotResponse]
GET    /activities/{id}/config             → EffectiveConfigResponse
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cadence.engine.types import ActivityKind, MetricKind
from cadence.schemas.schedule import DailySchedule, Schedule


class ActivityCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128, examples=["Morning run"])
    kind: ActivityKind = ActivityKind.checkbox
    schedule: Schedule = Field(default_factory=DailySchedule)
    created_date: Optional[date] = Field(
        default=None, description="First day the activity counts. Defaults to today."
    )
    metric_kind: Optional[MetricKind] = None
    target_value: Optional[float] = Field(default=None, gt=0)
    unit: Optional[str] = Field(default=None, max_length=32)
    parent_id: Optional[int] = None
    category: Optional[str] = Field(default=None, max_length=64)
    sort_order: int = 0

    @model_validator(mode="after")
    def _containers_have_no_values(self):
        if self.kind == ActivityKind.container and (
            self.target_value is not None or self.unit is not None or self.metric_kind is not None
        ):
            raise ValueError("containers cannot carry target_value, unit or metric_kind")
        return self


class ActivityUpdate(BaseModel):
    """
    Partial update. Only the fields present in the body change.

    With `future_only`, changes to kind/schedule/metric_kind/target_value/unit
    apply from `effective_date` (default today); earlier days keep evaluating
    under the previous configuration.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    kind: Optional[ActivityKind] = None
    schedule: Optional[Schedule] = None
    metric_kind: Optional[MetricKind] = None
    target_value: Optional[float] = Field(default=None, gt=0)
    unit: Optional[str] = Field(default=None, max_length=32)
    category: Optional[str] = Field(default=None, max_length=64)
    sort_order: Optional[int] = None
    future_only: bool = False
    effective_date: Optional[date] = None

    def changes(self) -> dict:
        data = self.model_dump(exclude_unset=True, exclude={"future_only", "effective_date"})
        if "schedule" in data:
            # Keep the validated model rather than its dict form.
            data["schedule"] = self.schedule
        for key in ("name", "kind", "schedule", "sort_order"):
            if key in data and data[key] is None:
                del data[key]
        return data


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    kind: ActivityKind
    schedule: Schedule
    metric_kind: Optional[MetricKind] = None
    target_value: Optional[float] = None
    unit: Optional[str] = None
    created_date: str
    stopped_at: Optional[str] = None
    parent_id: Optional[int] = None
    category: Optional[str] = None
    sort_order: int


class StopRequest(BaseModel):
    day: Optional[date] = Field(
        default=None, description="Last active day. Defaults to today."
    )


class ParentRequest(BaseModel):
    parent_id: Optional[int] = Field(
        description="Container to move into, or null for top level."
    )


class ConvertRequest(BaseModel):
    day: Optional[date] = Field(
        default=None, description="First day as a container. Defaults to today."
    )
    child_ids: list[int] = Field(default_factory=list)


class DissolveRequest(BaseModel):
    new_kind: ActivityKind = ActivityKind.checkbox
    day: Optional[date] = Field(
        default=None, description="First day as a leaf. Defaults to today."
    )
    delete_children: bool = False

    @model_validator(mode="after")
    def _leaf_kind(self):
        if self.new_kind == ActivityKind.container:
            raise ValueError("new_kind must be a leaf kind")
        return self


class SnapshotResponse(BaseModel):
    id: int
    activity_id: int
    effective_from: str
    effective_until: str
    kind: ActivityKind
    schedule: Schedule
    metric_kind: Optional[MetricKind] = None
    target_value: Optional[float] = None
    unit: Optional[str] = None
    parent_id: Optional[int] = None


class EffectiveConfigResponse(BaseModel):
    """Configuration in force for one activity on one day."""
    activity_id: int
    day: str
    kind: ActivityKind
    schedule: Schedule
    metric_kind: Optional[MetricKind] = None
    target_value: Optional[float] = None
    unit: Optional[str] = None
    parent_id: Optional[int] = None
    snapshot_id: Optional[int] = Field(
        default=None,
        description="Snapshot the configuration came from; null for the current configuration.",
    )
