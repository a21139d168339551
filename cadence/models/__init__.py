from .activity import Activity
from .config_snapshot import ActivityConfigSnapshot
from .activity_log import ActivityLog
from .vacation_day import VacationDay
from .goal import Goal, GoalActivity

__all__ = [
    "Activity",
    "ActivityConfigSnapshot",
    "ActivityLog",
    "VacationDay",
    "Goal",
    "GoalActivity",
]
