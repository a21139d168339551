"""
Goal service: goals and their activity links.

Public API
----------
create_goal / get_goal / list_goals / update_goal / delete_goal
list_links(db, goal_id)                                  -> list[GoalActivity]
link_activity(db, goal_id, activity_id, role, ...)       -> GoalActivity
update_link(db, goal_id, link_id, changes)               -> GoalActivity
unlink_activity(db, goal_id, link_id)                    -> None

Link rules
----------
- (goal, activity, role) is unique.
- A container and one of its children cannot both be habit links of the
  same goal: the child's days would count twice.
- Containers have no values and cannot be metric links.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from cadence.core.errors import (
    DoubleCountedLinkError,
    DuplicateGoalLinkError,
    GoalLinkNotFoundError,
    GoalNotFoundError,
    InvalidMetricLinkError,
)
from cadence.engine.types import GoalRole, MetricDirection
from cadence.models.activity import Activity
from cadence.models.goal import Goal, GoalActivity
from cadence.services.activities import get_activity

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

def create_goal(
    db: Session,
    title: str,
    deadline: Optional[date] = None,
    is_manually_paused: bool = False,
    sort_order: int = 0,
) -> Goal:
    goal = Goal(
        title=title,
        deadline=deadline,
        is_manually_paused=is_manually_paused,
        sort_order=sort_order,
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    logger.info("Created goal %s", goal.id)
    return goal


def get_goal(db: Session, goal_id: int) -> Goal:
    goal = db.get(Goal, goal_id)
    if goal is None:
        raise GoalNotFoundError(goal_id)
    return goal


def list_goals(db: Session) -> list[Goal]:
    return db.query(Goal).order_by(Goal.sort_order, Goal.id).all()


def update_goal(db: Session, goal_id: int, changes: dict[str, Any]) -> Goal:
    goal = get_goal(db, goal_id)
    for field_name, value in changes.items():
        if hasattr(goal, field_name):
            setattr(goal, field_name, value)
    db.commit()
    db.refresh(goal)
    return goal


def delete_goal(db: Session, goal_id: int) -> None:
    goal = get_goal(db, goal_id)
    db.query(GoalActivity).filter(GoalActivity.goal_id == goal.id).delete()
    db.delete(goal)
    db.commit()
    logger.info("Deleted goal %s", goal_id)


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------

def list_links(db: Session, goal_id: int) -> list[GoalActivity]:
    get_goal(db, goal_id)
    return (
        db.query(GoalActivity)
        .filter(GoalActivity.goal_id == goal_id)
        .order_by(GoalActivity.sort_order, GoalActivity.id)
        .all()
    )


def _get_link(db: Session, goal_id: int, link_id: int) -> GoalActivity:
    link = db.get(GoalActivity, link_id)
    if link is None or link.goal_id != goal_id:
        raise GoalLinkNotFoundError(goal_id, link_id)
    return link


def _check_double_count(db: Session, goal_id: int, activity: Activity) -> None:
    habit_ids = {
        row.activity_id
        for row in db.query(GoalActivity.activity_id).filter(
            GoalActivity.goal_id == goal_id,
            GoalActivity.role == GoalRole.habit,
        )
    }
    if activity.parent_id is not None and activity.parent_id in habit_ids:
        raise DoubleCountedLinkError(goal_id, activity.id, activity.parent_id)
    if activity.is_container:
        children = db.query(Activity.id).filter(Activity.parent_id == activity.id)
        for (child_id,) in children:
            if child_id in habit_ids:
                raise DoubleCountedLinkError(goal_id, activity.id, child_id)


def link_activity(
    db: Session,
    goal_id: int,
    activity_id: int,
    role: GoalRole = GoalRole.habit,
    weight: float = 1.0,
    metric_baseline: Optional[float] = None,
    metric_target: Optional[float] = None,
    metric_direction: Optional[MetricDirection] = None,
    sort_order: int = 0,
) -> GoalActivity:
    get_goal(db, goal_id)
    activity = get_activity(db, activity_id)

    duplicate = (
        db.query(GoalActivity)
        .filter(
            GoalActivity.goal_id == goal_id,
            GoalActivity.activity_id == activity_id,
            GoalActivity.role == role,
        )
        .first()
    )
    if duplicate is not None:
        raise DuplicateGoalLinkError(goal_id, activity_id, role.value)

    if role == GoalRole.metric:
        if activity.is_container:
            raise InvalidMetricLinkError(activity_id, "containers have no values")
    else:
        _check_double_count(db, goal_id, activity)

    link = GoalActivity(
        goal_id=goal_id,
        activity_id=activity_id,
        role=role,
        weight=weight,
        metric_baseline=metric_baseline if role == GoalRole.metric else None,
        metric_target=metric_target if role == GoalRole.metric else None,
        metric_direction=metric_direction if role == GoalRole.metric else None,
        sort_order=sort_order,
    )
    db.add(link)
    db.commit()
    db.refresh(link)
    logger.info("Linked activity %s to goal %s as %s", activity_id, goal_id, role.value)
    return link


def update_link(
    db: Session,
    goal_id: int,
    link_id: int,
    changes: dict[str, Any],
) -> GoalActivity:
    link = _get_link(db, goal_id, link_id)
    for field_name, value in changes.items():
        if field_name.startswith("metric_") and link.role != GoalRole.metric:
            continue
        if hasattr(link, field_name):
            setattr(link, field_name, value)
    db.commit()
    db.refresh(link)
    return link


def unlink_activity(db: Session, goal_id: int, link_id: int) -> None:
    link = _get_link(db, goal_id, link_id)
    db.delete(link)
    db.commit()
