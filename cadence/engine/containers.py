"""
Container aggregation.

Membership on a past date is approximated from the *current* parent
pointer, filtered by each child's own lifetime. Reparenting is not
versioned: a child moved into a container today is attributed to it for
every date inside the child's lifetime, and a child moved out is not.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from cadence.engine.evaluator import is_leaf_due
from cadence.engine.types import ActivityRecord, LogStatus, StoreView


@dataclass(frozen=True)
class ContainerDayStatus:
    container_id: int
    day: date
    members: tuple[ActivityRecord, ...]
    due_children: tuple[ActivityRecord, ...]
    scheduled: bool
    completed: bool
    skipped: bool


def children_as_of(container: ActivityRecord, day: date, view: StoreView) -> list[ActivityRecord]:
    """Children currently parented to `container` whose lifetime includes `day`."""
    return [
        child
        for child in view.current_children(container.id)
        if child.created_date <= day
        and (child.stopped_at is None or child.stopped_at > day)
    ]


def container_day_status(container: ActivityRecord, day: date, view: StoreView) -> ContainerDayStatus:
    """
    Derive the container's own status on `day` from its due children.

    - scheduled: at least one member child is due
    - completed: every due child has a Completed log
    - skipped:   not completed and every due child has a Skipped log

    The container's own exemptions (vacation, lifetime) are the caller's job.
    """
    members = children_as_of(container, day, view)
    due = tuple(child for child in members if is_leaf_due(child, day, view))
    scheduled = bool(due)
    completed = scheduled and all(
        view.has_status(child.id, day, LogStatus.completed) for child in due
    )
    skipped = (
        scheduled
        and not completed
        and all(view.has_status(child.id, day, LogStatus.skipped) for child in due)
    )
    return ContainerDayStatus(
        container_id=container.id,
        day=day,
        members=tuple(members),
        due_children=due,
        scheduled=scheduled,
        completed=completed,
        skipped=skipped,
    )
