"""
Temporal config resolver.

An activity's kind and schedule can change over its lifetime. Each
structural change appends an ActivityConfigSnapshot holding the
configuration that applied *before* the change. Resolving (activity, day)
returns the snapshot covering that day, or the current configuration when
no snapshot does.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from cadence.engine.types import ActivityKind, ActivityRecord, MetricKind
from cadence.schemas.schedule import Schedule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectiveConfig:
    kind: ActivityKind
    schedule: Schedule
    metric_kind: Optional[MetricKind] = None
    target_value: Optional[float] = None
    unit: Optional[str] = None
    parent_id: Optional[int] = None
    # None when the current configuration applies.
    snapshot_id: Optional[int] = None

    @property
    def is_container(self) -> bool:
        return self.kind == ActivityKind.container


def current_config(activity: ActivityRecord) -> EffectiveConfig:
    return EffectiveConfig(
        kind=activity.kind,
        schedule=activity.schedule,
        metric_kind=activity.metric_kind,
        target_value=activity.target_value,
        unit=activity.unit,
        parent_id=activity.parent_id,
    )


def resolve_config(activity: ActivityRecord, day: date) -> EffectiveConfig:
    """Return the configuration that was in effect for `activity` on `day`."""
    covering = [s for s in activity.snapshots if s.covers(day)]
    if not covering:
        return current_config(activity)
    if len(covering) > 1:
        # Overlapping history is a write-boundary bug; fall back to current.
        logger.warning(
            "Activity %s has %d snapshots covering %s, using current config",
            activity.id, len(covering), day,
        )
        return current_config(activity)

    snap = covering[0]
    return EffectiveConfig(
        kind=snap.kind,
        schedule=snap.schedule,
        metric_kind=snap.metric_kind,
        target_value=snap.target_value,
        unit=snap.unit,
        parent_id=snap.parent_id,
        snapshot_id=snap.id,
    )
