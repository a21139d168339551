"""
Log and vacation-day writes.

Public API
----------
upsert_log(db, activity_id, day, status, ...)   -> ActivityLog
delete_log(db, activity_id, day)                -> None
list_logs(db, activity_id, start, end)          -> list[ActivityLog]
add_vacation_day(db, day)                       -> VacationDay   (idempotent)
remove_vacation_day(db, day)                    -> None
list_vacation_days(db, start, end)              -> list[VacationDay]

At most one log exists per (activity, day): writing again replaces the
previous outcome. Logs are only accepted inside the activity's lifetime
[created_date, stopped_at], and never on a day the activity is a container
(a container's outcome comes from its children). The engine itself never
rejects stray rows.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from cadence.core.errors import ContainerLogError, LogNotFoundError, LogOutsideLifetimeError
from cadence.engine.resolver import resolve_config
from cadence.engine.types import LogStatus
from cadence.models.activity_log import ActivityLog
from cadence.models.vacation_day import VacationDay
from cadence.services.activities import get_activity, list_snapshots
from cadence.services.store import activity_record

logger = logging.getLogger(__name__)


def _find_log(db: Session, activity_id: int, day: date) -> Optional[ActivityLog]:
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.activity_id == activity_id, ActivityLog.day == day)
        .first()
    )


def upsert_log(
    db: Session,
    activity_id: int,
    day: date,
    status: LogStatus = LogStatus.completed,
    value: Optional[float] = None,
    note: Optional[str] = None,
    skip_reason: Optional[str] = None,
    media_ref: Optional[str] = None,
) -> ActivityLog:
    activity = get_activity(db, activity_id)
    if day < activity.created_date or (
        activity.stopped_at is not None and day > activity.stopped_at
    ):
        raise LogOutsideLifetimeError(activity_id, day)
    record = activity_record(activity, list_snapshots(db, activity_id))
    if resolve_config(record, day).is_container:
        raise ContainerLogError(activity_id, day)

    log = _find_log(db, activity_id, day)
    if log is None:
        log = ActivityLog(activity_id=activity_id, day=day)
        db.add(log)

    log.status = status
    log.value = value
    log.note = note
    # A skip reason only means something on a skipped day.
    log.skip_reason = skip_reason if status == LogStatus.skipped else None
    log.media_ref = media_ref

    db.commit()
    db.refresh(log)
    logger.debug("Logged %s for activity %s on %s", status.value, activity_id, day)
    return log


def delete_log(db: Session, activity_id: int, day: date) -> None:
    get_activity(db, activity_id)
    log = _find_log(db, activity_id, day)
    if log is None:
        raise LogNotFoundError(activity_id, day)
    db.delete(log)
    db.commit()


def list_logs(
    db: Session,
    activity_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[ActivityLog]:
    get_activity(db, activity_id)
    q = db.query(ActivityLog).filter(ActivityLog.activity_id == activity_id)
    if start is not None:
        q = q.filter(ActivityLog.day >= start)
    if end is not None:
        q = q.filter(ActivityLog.day <= end)
    return q.order_by(ActivityLog.day).all()


# ---------------------------------------------------------------------------
# Vacation days
# ---------------------------------------------------------------------------

def add_vacation_day(db: Session, day: date) -> VacationDay:
    existing = db.query(VacationDay).filter(VacationDay.day == day).first()
    if existing is not None:
        return existing
    vacation = VacationDay(day=day)
    db.add(vacation)
    db.commit()
    db.refresh(vacation)
    logger.info("Marked %s as a vacation day", day)
    return vacation


def remove_vacation_day(db: Session, day: date) -> None:
    """No-op when the day is not a vacation day."""
    db.query(VacationDay).filter(VacationDay.day == day).delete()
    db.commit()


def list_vacation_days(
    db: Session,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[VacationDay]:
    q = db.query(VacationDay)
    if start is not None:
        q = q.filter(VacationDay.day >= start)
    if end is not None:
        q = q.filter(VacationDay.day <= end)
    return q.order_by(VacationDay.day).all()
