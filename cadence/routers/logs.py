"""
Logs router - one recorded outcome per activity per day.

PUT    /activities/{id}/logs/{day}   - record (or replace) the day's outcome
DELETE /activities/{id}/logs/{day}   - clear it; the day reads as missed again
GET    /activities/{id}/logs         - list, optionally bounded by start/end
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from cadence.db.base import get_db
from cadence.models.activity_log import ActivityLog
from cadence.schemas.common import ErrorResponse
from cadence.schemas.log import LogRequest, LogResponse
from cadence.services import logs as log_service

router = APIRouter(prefix="/activities", tags=["logs"])


def _to_response(log: ActivityLog) -> LogResponse:
    return LogResponse(
        id=log.id,
        activity_id=log.activity_id,
        day=str(log.day),
        status=log.status,
        value=log.value,
        note=log.note,
        skip_reason=log.skip_reason,
        media_ref=log.media_ref,
    )


@router.put(
    "/{activity_id}/logs/{day}",
    response_model=LogResponse,
    summary="Record a day's outcome",
    responses={
        404: {"model": ErrorResponse, "description": "Activity not found."},
        422: {"model": ErrorResponse, "description": "Day outside the activity's lifetime."},
    },
)
def put_log(activity_id: int, day: date, payload: LogRequest, db: Session = Depends(get_db)):
    log = log_service.upsert_log(
        db,
        activity_id,
        day,
        status=payload.status,
        value=payload.value,
        note=payload.note,
        skip_reason=payload.skip_reason,
        media_ref=payload.media_ref,
    )
    return _to_response(log)


@router.delete(
    "/{activity_id}/logs/{day}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Activity or log not found."}},
)
def delete_log(activity_id: int, day: date, db: Session = Depends(get_db)):
    log_service.delete_log(db, activity_id, day)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{activity_id}/logs", response_model=list[LogResponse])
def list_logs(
    activity_id: int,
    start: Optional[date] = Query(default=None, examples=["2024-01-01"]),
    end: Optional[date] = Query(default=None, examples=["2024-01-31"]),
    db: Session = Depends(get_db),
):
    return [_to_response(log) for log in log_service.list_logs(db, activity_id, start, end)]
