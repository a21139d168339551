"""
Activity service: lifecycle and structural changes.

Public API
----------
create_activity(db, ...)                                  -> Activity
get_activity(db, activity_id)                             -> Activity
list_activities(db, include_stopped, parent_id)           -> list[Activity]
update_activity(db, activity_id, changes, future_only, effective_date) -> Activity
stop_activity / resume_activity                           -> Activity
set_parent(db, activity_id, parent_id)                    -> Activity
convert_to_container(db, activity_id, day, child_ids)     -> Activity
dissolve_container(db, activity_id, new_kind, day, delete_children) -> Activity
delete_activity(db, activity_id, delete_children)         -> None
list_snapshots(db, activity_id)                           -> list[ActivityConfigSnapshot]

History
-------
Every structural change (future-only edit, leaf → container,
container → leaf) first appends an ActivityConfigSnapshot holding the
configuration being replaced, valid from the day after the previous
snapshot (or created_date) through the day before the change. Snapshots are
never edited; ranges of one activity never overlap.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from cadence.core.errors import (
    ActivityNotFoundError,
    AlreadyContainerError,
    InvalidParentError,
    NotAContainerError,
    SnapshotOverlapError,
    StructuralChangeRequiredError,
)
from cadence.engine.types import ActivityKind, MetricKind
from cadence.models.activity import Activity
from cadence.models.activity_log import ActivityLog
from cadence.models.config_snapshot import ActivityConfigSnapshot
from cadence.models.goal import GoalActivity
from cadence.schemas.schedule import DailySchedule, Schedule

logger = logging.getLogger(__name__)

# Fields captured by a snapshot. Changing any of them with future_only=True
# preserves the old values for past dates.
STRUCTURAL_FIELDS = ("kind", "schedule", "metric_kind", "target_value", "unit")


def _today() -> date:
    return date.today()


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def get_activity(db: Session, activity_id: int) -> Activity:
    activity = db.get(Activity, activity_id)
    if activity is None:
        raise ActivityNotFoundError(activity_id)
    return activity


def list_activities(
    db: Session,
    include_stopped: bool = True,
    parent_id: Optional[int] = None,
) -> list[Activity]:
    q = db.query(Activity)
    if not include_stopped:
        q = q.filter(Activity.stopped_at.is_(None))
    if parent_id is not None:
        q = q.filter(Activity.parent_id == parent_id)
    return q.order_by(Activity.sort_order, Activity.id).all()


def list_snapshots(db: Session, activity_id: int) -> list[ActivityConfigSnapshot]:
    get_activity(db, activity_id)
    return (
        db.query(ActivityConfigSnapshot)
        .filter(ActivityConfigSnapshot.activity_id == activity_id)
        .order_by(ActivityConfigSnapshot.effective_from)
        .all()
    )


def _children_of(db: Session, container_id: int) -> list[Activity]:
    return db.query(Activity).filter(Activity.parent_id == container_id).all()


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------

def append_snapshot(
    db: Session,
    activity: Activity,
    change_day: date,
) -> Optional[ActivityConfigSnapshot]:
    """
    Capture the activity's current configuration for the days before
    `change_day`. Returns None when there is no uncovered day to preserve
    (change on the creation day, or a second change on the same day).
    Flushes; the caller commits.
    """
    last: Optional[ActivityConfigSnapshot] = (
        db.query(ActivityConfigSnapshot)
        .filter(ActivityConfigSnapshot.activity_id == activity.id)
        .order_by(ActivityConfigSnapshot.effective_until.desc())
        .first()
    )
    if last is not None and change_day <= last.effective_until:
        raise SnapshotOverlapError(activity.id, change_day, last.effective_until)

    start = last.effective_until + timedelta(days=1) if last else activity.created_date
    until = change_day - timedelta(days=1)
    if until < start:
        return None

    snap = ActivityConfigSnapshot(
        activity_id=activity.id,
        effective_from=start,
        effective_until=until,
        kind=activity.kind,
        schedule_data=activity.schedule_data,
        metric_kind=activity.metric_kind,
        target_value=activity.target_value,
        unit=activity.unit,
        parent_id=activity.parent_id,
    )
    db.add(snap)
    db.flush()
    logger.info(
        "Snapshot %s for activity %s covers %s..%s (kind=%s)",
        snap.id, activity.id, start, until, _ev(activity.kind),
    )
    return snap


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


# ---------------------------------------------------------------------------
# Create / update
# ---------------------------------------------------------------------------

def _validate_parent(db: Session, activity_id: int, parent_id: int, kind: ActivityKind) -> None:
    if parent_id == activity_id:
        raise InvalidParentError(activity_id, parent_id, "an activity cannot contain itself")
    parent = db.get(Activity, parent_id)
    if parent is None:
        raise ActivityNotFoundError(parent_id)
    if not parent.is_container:
        raise InvalidParentError(activity_id, parent_id, "parent is not a container")
    if kind == ActivityKind.container:
        raise InvalidParentError(activity_id, parent_id, "containers cannot be nested")


def create_activity(
    db: Session,
    name: str,
    kind: ActivityKind = ActivityKind.checkbox,
    schedule: Optional[Schedule] = None,
    created_date: Optional[date] = None,
    metric_kind: Optional[MetricKind] = None,
    target_value: Optional[float] = None,
    unit: Optional[str] = None,
    parent_id: Optional[int] = None,
    category: Optional[str] = None,
    sort_order: int = 0,
) -> Activity:
    if parent_id is not None:
        # id 0 never exists, so self-containment can't be hit before insert.
        _validate_parent(db, 0, parent_id, kind)

    activity = Activity(
        name=name,
        kind=kind,
        created_date=created_date or _today(),
        metric_kind=None if kind == ActivityKind.container else metric_kind,
        target_value=None if kind == ActivityKind.container else target_value,
        unit=None if kind == ActivityKind.container else unit,
        parent_id=parent_id,
        category=category,
        sort_order=sort_order,
    )
    activity.schedule = schedule or DailySchedule()
    db.add(activity)
    db.commit()
    db.refresh(activity)
    logger.info("Created activity %s (%s, %s)", activity.id, _ev(kind), activity.schedule.type)
    return activity


def update_activity(
    db: Session,
    activity_id: int,
    changes: dict[str, Any],
    future_only: bool = False,
    effective_date: Optional[date] = None,
) -> Activity:
    """
    Apply `changes` (field → new value). With `future_only`, structural
    changes only apply from `effective_date` (default today): the previous
    configuration is snapshotted for the days before it. Without it, the
    change rewrites the activity's current configuration and every date not
    covered by a snapshot evaluates under the new rules.
    """
    activity = get_activity(db, activity_id)

    new_kind = changes.get("kind")
    if new_kind is not None and new_kind != activity.kind:
        if new_kind == ActivityKind.container:
            raise StructuralChangeRequiredError(activity_id, "convert-to-container")
        if activity.is_container:
            raise StructuralChangeRequiredError(activity_id, "dissolve")

    structural = any(
        f in changes and _differs(activity, f, changes[f]) for f in STRUCTURAL_FIELDS
    )
    if future_only and structural:
        append_snapshot(db, activity, effective_date or _today())

    for field_name, value in changes.items():
        if field_name == "schedule":
            activity.schedule = value
        elif hasattr(activity, field_name):
            setattr(activity, field_name, value)

    if activity.is_container:
        _clear_leaf_fields(activity)

    db.commit()
    db.refresh(activity)
    return activity


def _differs(activity: Activity, field_name: str, value: Any) -> bool:
    if field_name == "schedule":
        return value != activity.schedule
    return getattr(activity, field_name) != value


def _clear_leaf_fields(activity: Activity) -> None:
    activity.target_value = None
    activity.unit = None
    activity.metric_kind = None


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

def stop_activity(db: Session, activity_id: int, day: Optional[date] = None) -> Activity:
    """Pause tracking: the activity is not due after `day` (default today)."""
    activity = get_activity(db, activity_id)
    activity.stopped_at = day or _today()
    db.commit()
    db.refresh(activity)
    logger.info("Stopped activity %s at %s", activity.id, activity.stopped_at)
    return activity


def resume_activity(db: Session, activity_id: int) -> Activity:
    activity = get_activity(db, activity_id)
    activity.stopped_at = None
    db.commit()
    db.refresh(activity)
    logger.info("Resumed activity %s", activity.id)
    return activity


def set_parent(db: Session, activity_id: int, parent_id: Optional[int]) -> Activity:
    """Move an activity into a container, or to top level with parent_id=None."""
    activity = get_activity(db, activity_id)
    if parent_id is not None:
        _validate_parent(db, activity_id, parent_id, activity.kind)
    activity.parent_id = parent_id
    db.commit()
    db.refresh(activity)
    return activity


def delete_activity(db: Session, activity_id: int, delete_children: bool = False) -> None:
    """
    Permanently remove an activity with its logs, snapshots and goal links.
    A container's children are deleted too when `delete_children`, otherwise
    moved to top level.
    """
    activity = get_activity(db, activity_id)
    for child in _children_of(db, activity.id):
        if delete_children:
            _delete_one(db, child)
        else:
            child.parent_id = None
    _delete_one(db, activity)
    db.commit()
    logger.info("Deleted activity %s (delete_children=%s)", activity_id, delete_children)


def _delete_one(db: Session, activity: Activity) -> None:
    db.query(ActivityLog).filter(ActivityLog.activity_id == activity.id).delete()
    db.query(ActivityConfigSnapshot).filter(
        ActivityConfigSnapshot.activity_id == activity.id
    ).delete()
    db.query(GoalActivity).filter(GoalActivity.activity_id == activity.id).delete()
    db.delete(activity)


# ---------------------------------------------------------------------------
# Structural changes
# ---------------------------------------------------------------------------

def convert_to_container(
    db: Session,
    activity_id: int,
    day: Optional[date] = None,
    child_ids: Iterable[int] = (),
) -> Activity:
    """
    Turn a leaf into a container from `day` (default today). Leaf-only
    fields are cleared and the schedule resets to daily, since a container
    is due through its children; the leaf configuration survives in a
    snapshot. Every child is validated before anything is written.
    """
    activity = get_activity(db, activity_id)
    if activity.is_container:
        raise AlreadyContainerError(activity_id)
    if activity.parent_id is not None:
        raise InvalidParentError(
            activity_id, activity.parent_id, "containers cannot be nested"
        )

    children = []
    for child_id in child_ids:
        if child_id == activity.id:
            raise InvalidParentError(child_id, activity.id, "an activity cannot contain itself")
        child = get_activity(db, child_id)
        if child.is_container:
            raise InvalidParentError(child.id, activity.id, "containers cannot be nested")
        children.append(child)

    append_snapshot(db, activity, day or _today())
    activity.kind = ActivityKind.container
    activity.schedule = DailySchedule()
    _clear_leaf_fields(activity)

    for child in children:
        child.parent_id = activity.id

    db.commit()
    db.refresh(activity)
    logger.info("Converted activity %s to container", activity.id)
    return activity


def dissolve_container(
    db: Session,
    activity_id: int,
    new_kind: ActivityKind = ActivityKind.checkbox,
    day: Optional[date] = None,
    delete_children: bool = False,
) -> Activity:
    """
    Turn a container back into a leaf of `new_kind` from `day` (default
    today). Children are moved to top level, or deleted with
    `delete_children`.
    """
    activity = get_activity(db, activity_id)
    if not activity.is_container:
        raise NotAContainerError(activity_id)
    if new_kind == ActivityKind.container:
        raise AlreadyContainerError(activity_id)

    append_snapshot(db, activity, day or _today())
    activity.kind = new_kind

    for child in _children_of(db, activity.id):
        if delete_children:
            _delete_one(db, child)
        else:
            child.parent_id = None

    db.commit()
    db.refresh(activity)
    logger.info("Dissolved container %s into %s", activity.id, _ev(new_kind))
    return activity
