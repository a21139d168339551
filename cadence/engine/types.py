"""
Plain record types the engine computes over.

These are frozen dataclasses: no ORM, no Pydantic models apart from the
`Schedule` union. `cadence.services.store` builds them from one consistent
read of the database; tests build them directly.
"""
from __future__ import annotations

import enum
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from cadence.schemas.schedule import DailySchedule, Schedule


# ---------------------------------------------------------------------------
# Enums (shared with the ORM models)
# ---------------------------------------------------------------------------

class ActivityKind(str, enum.Enum):
    checkbox = "checkbox"
    value = "value"
    cumulative = "cumulative"
    metric = "metric"
    container = "container"


class MetricKind(str, enum.Enum):
    value = "value"
    checkbox = "checkbox"
    photo = "photo"


class LogStatus(str, enum.Enum):
    completed = "completed"
    skipped = "skipped"


class GoalRole(str, enum.Enum):
    habit = "habit"
    metric = "metric"


class MetricDirection(str, enum.Enum):
    increase = "increase"
    decrease = "decrease"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConfigSnapshotRecord:
    """Configuration an activity had during [effective_from, effective_until]."""
    id: int
    activity_id: int
    effective_from: date
    effective_until: date
    kind: ActivityKind
    schedule: Schedule
    metric_kind: Optional[MetricKind] = None
    target_value: Optional[float] = None
    unit: Optional[str] = None
    parent_id: Optional[int] = None

    def covers(self, day: date) -> bool:
        return self.effective_from <= day <= self.effective_until


@dataclass(frozen=True)
class ActivityRecord:
    id: int
    name: str
    created_date: date
    kind: ActivityKind = ActivityKind.checkbox
    schedule: Schedule = field(default_factory=DailySchedule)
    metric_kind: Optional[MetricKind] = None
    target_value: Optional[float] = None
    unit: Optional[str] = None
    stopped_at: Optional[date] = None
    parent_id: Optional[int] = None
    category: Optional[str] = None
    sort_order: int = 0
    # Ordered by effective_from.
    snapshots: tuple[ConfigSnapshotRecord, ...] = ()

    def is_alive_on(self, day: date) -> bool:
        """Inside the [created_date, stopped_at] lifetime window."""
        if day < self.created_date:
            return False
        if self.stopped_at is not None and day > self.stopped_at:
            return False
        return True


@dataclass(frozen=True)
class LogRecord:
    activity_id: int
    day: date
    status: LogStatus
    value: Optional[float] = None


@dataclass(frozen=True)
class GoalLinkRecord:
    id: int
    activity_id: int
    role: GoalRole = GoalRole.habit
    weight: float = 1.0
    metric_baseline: Optional[float] = None
    metric_target: Optional[float] = None
    metric_direction: Optional[MetricDirection] = None


@dataclass(frozen=True)
class GoalRecord:
    id: int
    title: str
    deadline: Optional[date] = None
    is_manually_paused: bool = False
    links: tuple[GoalLinkRecord, ...] = ()

    @property
    def habit_links(self) -> list[GoalLinkRecord]:
        return [link for link in self.links if link.role == GoalRole.habit]

    @property
    def metric_links(self) -> list[GoalLinkRecord]:
        return [link for link in self.links if link.role == GoalRole.metric]

    def is_paused(self, reference_date: date) -> bool:
        if self.is_manually_paused:
            return True
        return self.deadline is not None and self.deadline < reference_date


# ---------------------------------------------------------------------------
# Store view - one consistent read of the store, indexed for lookups
# ---------------------------------------------------------------------------

@dataclass
class StoreView:
    """
    Read-only view over activities, logs and vacation days.

    Builds the container → children and (activity, day) → logs indexes
    once so that window and goal calculations stay linear in the window.
    """
    activities: dict[int, ActivityRecord]
    logs: list[LogRecord] = field(default_factory=list)
    vacation_days: frozenset[date] = frozenset()

    _children: dict[int, list[ActivityRecord]] = field(init=False, repr=False)
    _logs_by_day: dict[tuple[int, date], list[LogRecord]] = field(init=False, repr=False)
    _logs_by_activity: dict[int, list[LogRecord]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.vacation_days = frozenset(self.vacation_days)
        self._children = defaultdict(list)
        for activity in self.activities.values():
            if activity.parent_id is not None:
                self._children[activity.parent_id].append(activity)
        for children in self._children.values():
            children.sort(key=lambda a: (a.sort_order, a.id))

        self._logs_by_day = defaultdict(list)
        self._logs_by_activity = defaultdict(list)
        for log in self.logs:
            self._logs_by_day[(log.activity_id, log.day)].append(log)
            self._logs_by_activity[log.activity_id].append(log)
        for logs in self._logs_by_activity.values():
            logs.sort(key=lambda lg: lg.day)

    @classmethod
    def build(
        cls,
        activities: Iterable[ActivityRecord],
        logs: Iterable[LogRecord] = (),
        vacation_days: Iterable[date] = (),
    ) -> "StoreView":
        return cls(
            activities={a.id: a for a in activities},
            logs=list(logs),
            vacation_days=frozenset(vacation_days),
        )

    def get(self, activity_id: int) -> Optional[ActivityRecord]:
        return self.activities.get(activity_id)

    def is_vacation(self, day: date) -> bool:
        return day in self.vacation_days

    def current_children(self, container_id: int) -> list[ActivityRecord]:
        """Activities whose parent pointer currently names this container."""
        return list(self._children.get(container_id, ()))

    def logs_on(self, activity_id: int, day: date) -> list[LogRecord]:
        return self._logs_by_day.get((activity_id, day), [])

    def logs_for(self, activity_id: int) -> list[LogRecord]:
        """All logs of one activity, oldest first."""
        return self._logs_by_activity.get(activity_id, [])

    def has_status(self, activity_id: int, day: date, status: LogStatus) -> bool:
        return any(log.status == status for log in self.logs_on(activity_id, day))
