"""
Activities router - CRUD, lifecycle and structural changes.

POST   /activities                                - create
GET    /activities                                - list
GET    /activities/{id}                           - read
PATCH  /activities/{id}                           - update (optionally future-only)
DELETE /activities/{id}                           - delete with logs, snapshots, links
POST   /activities/{id}/stop                      - stop tracking
POST   /activities/{id}/resume                    - resume tracking
PUT    /activities/{id}/parent                    - move into / out of a container
POST   /activities/{id}/convert-to-container      - leaf → container
POST   /activities/{id}/dissolve                  - container → leaf
GET    /activities/{id}/snapshots                 - configuration history
GET    /activities/{id}/config                    - configuration in force on a day
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from cadence.db.base import get_db
from cadence.engine.resolver import EffectiveConfig
from cadence.models.activity import Activity
from cadence.models.config_snapshot import ActivityConfigSnapshot
from cadence.schemas.activity import (
    ActivityCreate,
    ActivityResponse,
    ActivityUpdate,
    ConvertRequest,
    DissolveRequest,
    EffectiveConfigResponse,
    ParentRequest,
    SnapshotResponse,
    StopRequest,
)
from cadence.schemas.common import ErrorResponse
from cadence.services import activities as activity_service
from cadence.services.scoring import effective_config

router = APIRouter(prefix="/activities", tags=["activities"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Activity not found."}}


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _to_response(a: Activity) -> ActivityResponse:
    return ActivityResponse(
        id=a.id,
        name=a.name,
        kind=a.kind,
        schedule=a.schedule,
        metric_kind=a.metric_kind,
        target_value=a.target_value,
        unit=a.unit,
        created_date=str(a.created_date),
        stopped_at=str(a.stopped_at) if a.stopped_at else None,
        parent_id=a.parent_id,
        category=a.category,
        sort_order=a.sort_order,
    )


def _snapshot_to_response(s: ActivityConfigSnapshot) -> SnapshotResponse:
    return SnapshotResponse(
        id=s.id,
        activity_id=s.activity_id,
        effective_from=str(s.effective_from),
        effective_until=str(s.effective_until),
        kind=s.kind,
        schedule=s.schedule,
        metric_kind=s.metric_kind,
        target_value=s.target_value,
        unit=s.unit,
        parent_id=s.parent_id,
    )


def _config_to_response(activity_id: int, day: date, c: EffectiveConfig) -> EffectiveConfigResponse:
    return EffectiveConfigResponse(
        activity_id=activity_id,
        day=str(day),
        kind=c.kind,
        schedule=c.schedule,
        metric_kind=c.metric_kind,
        target_value=c.target_value,
        unit=c.unit,
        parent_id=c.parent_id,
        snapshot_id=c.snapshot_id,
    )


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=ActivityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an activity",
    responses={422: {"model": ErrorResponse, "description": "Invalid parent or body."}},
)
def create(payload: ActivityCreate, db: Session = Depends(get_db)):
    activity = activity_service.create_activity(
        db,
        name=payload.name,
        kind=payload.kind,
        schedule=payload.schedule,
        created_date=payload.created_date,
        metric_kind=payload.metric_kind,
        target_value=payload.target_value,
        unit=payload.unit,
        parent_id=payload.parent_id,
        category=payload.category,
        sort_order=payload.sort_order,
    )
    return _to_response(activity)


@router.get("", response_model=list[ActivityResponse], summary="List activities")
def list_all(
    include_stopped: bool = Query(default=True, description="Include stopped activities."),
    parent_id: Optional[int] = Query(
        default=None, description="Only children of this container.", examples=[3]
    ),
    db: Session = Depends(get_db),
):
    return [
        _to_response(a)
        for a in activity_service.list_activities(db, include_stopped, parent_id)
    ]


@router.get("/{activity_id}", response_model=ActivityResponse, responses=_NOT_FOUND)
def read(activity_id: int, db: Session = Depends(get_db)):
    return _to_response(activity_service.get_activity(db, activity_id))


@router.patch(
    "/{activity_id}",
    response_model=ActivityResponse,
    summary="Update an activity",
    responses={
        **_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Change needs a structural endpoint."},
    },
)
def update(activity_id: int, payload: ActivityUpdate, db: Session = Depends(get_db)):
    """
    Without `future_only` the new configuration is applied to the whole
    history not covered by a snapshot. With it, the current configuration is
    preserved for days before `effective_date`.
    """
    activity = activity_service.update_activity(
        db,
        activity_id,
        payload.changes(),
        future_only=payload.future_only,
        effective_date=payload.effective_date,
    )
    return _to_response(activity)


@router.delete(
    "/{activity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
)
def delete(
    activity_id: int,
    delete_children: bool = Query(
        default=False,
        description="Also delete a container's children instead of moving them to top level.",
    ),
    db: Session = Depends(get_db),
):
    activity_service.delete_activity(db, activity_id, delete_children=delete_children)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

@router.post("/{activity_id}/stop", response_model=ActivityResponse, responses=_NOT_FOUND)
def stop(activity_id: int, payload: Optional[StopRequest] = None, db: Session = Depends(get_db)):
    day = payload.day if payload else None
    return _to_response(activity_service.stop_activity(db, activity_id, day))


@router.post("/{activity_id}/resume", response_model=ActivityResponse, responses=_NOT_FOUND)
def resume(activity_id: int, db: Session = Depends(get_db)):
    return _to_response(activity_service.resume_activity(db, activity_id))


@router.put(
    "/{activity_id}/parent",
    response_model=ActivityResponse,
    responses={**_NOT_FOUND, 422: {"model": ErrorResponse, "description": "Invalid parent."}},
)
def move(activity_id: int, payload: ParentRequest, db: Session = Depends(get_db)):
    return _to_response(activity_service.set_parent(db, activity_id, payload.parent_id))


# ---------------------------------------------------------------------------
# Structural changes
# ---------------------------------------------------------------------------

@router.post(
    "/{activity_id}/convert-to-container",
    response_model=ActivityResponse,
    responses={**_NOT_FOUND, 409: {"model": ErrorResponse, "description": "Already a container."}},
)
def convert(
    activity_id: int,
    payload: Optional[ConvertRequest] = None,
    db: Session = Depends(get_db),
):
    payload = payload or ConvertRequest()
    activity = activity_service.convert_to_container(
        db, activity_id, day=payload.day, child_ids=payload.child_ids
    )
    return _to_response(activity)


@router.post(
    "/{activity_id}/dissolve",
    response_model=ActivityResponse,
    responses={**_NOT_FOUND, 409: {"model": ErrorResponse, "description": "Not a container."}},
)
def dissolve(
    activity_id: int,
    payload: Optional[DissolveRequest] = None,
    db: Session = Depends(get_db),
):
    payload = payload or DissolveRequest()
    activity = activity_service.dissolve_container(
        db,
        activity_id,
        new_kind=payload.new_kind,
        day=payload.day,
        delete_children=payload.delete_children,
    )
    return _to_response(activity)


@router.get(
    "/{activity_id}/snapshots",
    response_model=list[SnapshotResponse],
    summary="Configuration history",
    responses=_NOT_FOUND,
)
def snapshots(activity_id: int, db: Session = Depends(get_db)):
    return [_snapshot_to_response(s) for s in activity_service.list_snapshots(db, activity_id)]


@router.get(
    "/{activity_id}/config",
    response_model=EffectiveConfigResponse,
    summary="Configuration in force on a day",
    responses=_NOT_FOUND,
)
def config_on(
    activity_id: int,
    day: Optional[date] = Query(
        default=None, description="Day to resolve. Defaults to today.", examples=["2024-03-01"]
    ),
    db: Session = Depends(get_db),
):
    day = day or date.today()
    return _config_to_response(activity_id, day, effective_config(db, activity_id, day))
