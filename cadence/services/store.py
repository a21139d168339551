"""
Read-model loader: one consistent read of the store → engine records.

Callers compute windows and goal scores against the returned StoreView, so
every number in one response comes from the same point-in-time view.
"""
from __future__ import annotations

from collections import defaultdict

from sqlalchemy.orm import Session

from cadence.engine.types import (
    ActivityRecord,
    ConfigSnapshotRecord,
    GoalLinkRecord,
    GoalRecord,
    LogRecord,
    StoreView,
)
from cadence.models.activity import Activity
from cadence.models.activity_log import ActivityLog
from cadence.models.config_snapshot import ActivityConfigSnapshot
from cadence.models.goal import Goal, GoalActivity
from cadence.models.vacation_day import VacationDay


def snapshot_record(snap: ActivityConfigSnapshot) -> ConfigSnapshotRecord:
    return ConfigSnapshotRecord(
        id=snap.id,
        activity_id=snap.activity_id,
        effective_from=snap.effective_from,
        effective_until=snap.effective_until,
        kind=snap.kind,
        schedule=snap.schedule,
        metric_kind=snap.metric_kind,
        target_value=snap.target_value,
        unit=snap.unit,
        parent_id=snap.parent_id,
    )


def activity_record(
    activity: Activity,
    snapshots: list[ActivityConfigSnapshot] | None = None,
) -> ActivityRecord:
    ordered = sorted(snapshots or [], key=lambda s: (s.effective_from, s.id))
    return ActivityRecord(
        id=activity.id,
        name=activity.name,
        created_date=activity.created_date,
        kind=activity.kind,
        schedule=activity.schedule,
        metric_kind=activity.metric_kind,
        target_value=activity.target_value,
        unit=activity.unit,
        stopped_at=activity.stopped_at,
        parent_id=activity.parent_id,
        category=activity.category,
        sort_order=activity.sort_order,
        snapshots=tuple(snapshot_record(s) for s in ordered),
    )


def goal_record(goal: Goal, links: list[GoalActivity]) -> GoalRecord:
    ordered = sorted(links, key=lambda link: (link.sort_order, link.id))
    return GoalRecord(
        id=goal.id,
        title=goal.title,
        deadline=goal.deadline,
        is_manually_paused=goal.is_manually_paused,
        links=tuple(
            GoalLinkRecord(
                id=link.id,
                activity_id=link.activity_id,
                role=link.role,
                weight=link.weight,
                metric_baseline=link.metric_baseline,
                metric_target=link.metric_target,
                metric_direction=link.metric_direction,
            )
            for link in ordered
        ),
    )


def load_store_view(db: Session) -> StoreView:
    """Load activities (with snapshots), logs and vacation days."""
    snapshots_by_activity: dict[int, list[ActivityConfigSnapshot]] = defaultdict(list)
    for snap in db.query(ActivityConfigSnapshot).all():
        snapshots_by_activity[snap.activity_id].append(snap)

    activities = [
        activity_record(a, snapshots_by_activity.get(a.id))
        for a in db.query(Activity).all()
    ]
    logs = [
        LogRecord(
            activity_id=log.activity_id,
            day=log.day,
            status=log.status,
            value=log.value,
        )
        for log in db.query(ActivityLog).all()
    ]
    vacation_days = [v.day for v in db.query(VacationDay.day).all()]
    return StoreView.build(activities, logs, vacation_days)


def load_goal_record(db: Session, goal: Goal) -> GoalRecord:
    links = db.query(GoalActivity).filter(GoalActivity.goal_id == goal.id).all()
    return goal_record(goal, links)
