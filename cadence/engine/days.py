"""
Single-day evaluation of an activity, leaf or container.

Public API
----------
evaluate_day(activity, day, view)  -> DayEvaluation
activities_for_day(view, day)      -> list[DayEvaluation]   (top-level, due only)
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from cadence.engine.containers import container_day_status
from cadence.engine.evaluator import exemption, is_due
from cadence.engine.resolver import EffectiveConfig, resolve_config
from cadence.engine.types import ActivityRecord, LogStatus, StoreView


@dataclass(frozen=True)
class DayEvaluation:
    activity_id: int
    day: date
    config: EffectiveConfig
    scheduled: bool
    # Only ever True on scheduled days.
    completed: bool
    skipped: bool
    exempt_reason: Optional[str] = None
    # Containers only: ids of the children that were due.
    due_child_ids: tuple[int, ...] = ()


def evaluate_day(activity: ActivityRecord, day: date, view: StoreView) -> DayEvaluation:
    config = resolve_config(activity, day)

    reason = exemption(activity, day, view.vacation_days)
    if reason is not None:
        return DayEvaluation(
            activity_id=activity.id,
            day=day,
            config=config,
            scheduled=False,
            completed=False,
            skipped=False,
            exempt_reason=reason,
        )

    if config.is_container:
        status = container_day_status(activity, day, view)
        return DayEvaluation(
            activity_id=activity.id,
            day=day,
            config=config,
            scheduled=status.scheduled,
            completed=status.completed,
            skipped=status.skipped,
            due_child_ids=tuple(child.id for child in status.due_children),
        )

    scheduled = is_due(config.schedule, day)
    completed = scheduled and view.has_status(activity.id, day, LogStatus.completed)
    skipped = (
        scheduled
        and not completed
        and view.has_status(activity.id, day, LogStatus.skipped)
    )
    return DayEvaluation(
        activity_id=activity.id,
        day=day,
        config=config,
        scheduled=scheduled,
        completed=completed,
        skipped=skipped,
    )


def activities_for_day(view: StoreView, day: date) -> list[DayEvaluation]:
    """Top-level activities due on `day`; children are reached via their container."""
    # A parent id naming a deleted container leaves the activity top-level.
    top_level = sorted(
        (
            a for a in view.activities.values()
            if a.parent_id is None or view.get(a.parent_id) is None
        ),
        key=lambda a: (a.sort_order, a.id),
    )
    evaluations = [evaluate_day(a, day, view) for a in top_level]
    return [ev for ev in evaluations if ev.scheduled]
