"""
Vacation days - global days on which nothing is due.

GET    /vacation-days           - list, optionally bounded by start/end
POST   /vacation-days           - mark a day (idempotent)
DELETE /vacation-days/{day}     - unmark a day
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from cadence.db.base import get_db
from cadence.models.vacation_day import VacationDay
from cadence.schemas.log import VacationDayRequest, VacationDayResponse
from cadence.services import logs as log_service

router = APIRouter(prefix="/vacation-days", tags=["vacation"])


def _to_response(v: VacationDay) -> VacationDayResponse:
    return VacationDayResponse(id=v.id, day=str(v.day))


@router.get("", response_model=list[VacationDayResponse])
def list_days(
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
):
    return [_to_response(v) for v in log_service.list_vacation_days(db, start, end)]


@router.post("", response_model=VacationDayResponse, status_code=status.HTTP_201_CREATED)
def add_day(payload: VacationDayRequest, db: Session = Depends(get_db)):
    return _to_response(log_service.add_vacation_day(db, payload.day))


@router.delete("/{day}", status_code=status.HTTP_204_NO_CONTENT)
def remove_day(day: date, db: Session = Depends(get_db)):
    log_service.remove_vacation_day(db, day)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
