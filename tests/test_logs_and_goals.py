"""Tests for the log, vacation-day and goal services."""
from datetime import date

import pytest

from cadence.core.errors import (
    ContainerLogError,
    DoubleCountedLinkError,
    DuplicateGoalLinkError,
    GoalLinkNotFoundError,
    GoalNotFoundError,
    InvalidMetricLinkError,
    LogNotFoundError,
    LogOutsideLifetimeError,
)
from cadence.engine.types import ActivityKind, GoalRole, LogStatus, MetricDirection
from cadence.models import GoalActivity
from cadence.services import goals as goal_svc
from cadence.services import logs as log_svc
from cadence.services.activities import create_activity, convert_to_container, stop_activity
from cadence.services.scoring import goal_metrics

CREATED = date(2024, 1, 1)


def _activity(db, name="Read", **kw):
    kw.setdefault("created_date", CREATED)
    return create_activity(db, name=name, **kw)


class TestLogs:
    def test_second_write_replaces_the_first(self, db):
        a = _activity(db)
        log_svc.upsert_log(db, a.id, date(2024, 1, 2), status=LogStatus.skipped,
                           skip_reason="sick")
        log = log_svc.upsert_log(db, a.id, date(2024, 1, 2), value=3.0)
        assert log.status == LogStatus.completed
        assert log.skip_reason is None
        assert len(log_svc.list_logs(db, a.id)) == 1

    def test_log_before_creation_is_rejected(self, db):
        a = _activity(db)
        with pytest.raises(LogOutsideLifetimeError):
            log_svc.upsert_log(db, a.id, date(2023, 12, 31))

    def test_log_after_stop_is_rejected(self, db):
        a = _activity(db)
        stop_activity(db, a.id, date(2024, 1, 10))
        log_svc.upsert_log(db, a.id, date(2024, 1, 10))
        with pytest.raises(LogOutsideLifetimeError):
            log_svc.upsert_log(db, a.id, date(2024, 1, 11))

    def test_log_on_a_container_day_is_rejected(self, db):
        c = _activity(db, name="Routine", kind=ActivityKind.container)
        with pytest.raises(ContainerLogError):
            log_svc.upsert_log(db, c.id, date(2024, 1, 2))
        assert log_svc.list_logs(db, c.id) == []

    def test_leaf_days_before_conversion_still_accept_logs(self, db):
        a = _activity(db)
        convert_to_container(db, a.id, day=date(2024, 1, 10))
        log_svc.upsert_log(db, a.id, date(2024, 1, 9))
        with pytest.raises(ContainerLogError):
            log_svc.upsert_log(db, a.id, date(2024, 1, 10))

    def test_delete_missing_log(self, db):
        a = _activity(db)
        with pytest.raises(LogNotFoundError):
            log_svc.delete_log(db, a.id, date(2024, 1, 2))

    def test_list_logs_in_range(self, db):
        a = _activity(db)
        for d in (2, 5, 9):
            log_svc.upsert_log(db, a.id, date(2024, 1, d))
        logs = log_svc.list_logs(db, a.id, start=date(2024, 1, 3), end=date(2024, 1, 9))
        assert [log.day for log in logs] == [date(2024, 1, 5), date(2024, 1, 9)]

    def test_vacation_days_are_idempotent(self, db):
        first = log_svc.add_vacation_day(db, date(2024, 7, 1))
        again = log_svc.add_vacation_day(db, date(2024, 7, 1))
        assert first.id == again.id
        log_svc.remove_vacation_day(db, date(2024, 7, 1))
        assert log_svc.list_vacation_days(db) == []


class TestGoalLinks:
    def test_duplicate_link_is_rejected(self, db):
        a = _activity(db)
        goal = goal_svc.create_goal(db, "Learn")
        goal_svc.link_activity(db, goal.id, a.id)
        with pytest.raises(DuplicateGoalLinkError):
            goal_svc.link_activity(db, goal.id, a.id)

    def test_same_activity_may_be_habit_and_metric(self, db):
        a = _activity(db, kind=ActivityKind.metric)
        goal = goal_svc.create_goal(db, "Lose weight")
        goal_svc.link_activity(db, goal.id, a.id, role=GoalRole.habit)
        goal_svc.link_activity(db, goal.id, a.id, role=GoalRole.metric,
                               metric_baseline=80, metric_target=70,
                               metric_direction=MetricDirection.decrease)
        assert len(goal_svc.list_links(db, goal.id)) == 2

    def test_child_of_linked_container_is_double_counted(self, db):
        c = create_activity(db, name="Routine", kind=ActivityKind.container,
                            created_date=CREATED)
        child = _activity(db, parent_id=c.id)
        goal = goal_svc.create_goal(db, "Mornings")
        goal_svc.link_activity(db, goal.id, c.id)
        with pytest.raises(DoubleCountedLinkError):
            goal_svc.link_activity(db, goal.id, child.id)

    def test_container_of_linked_child_is_double_counted(self, db):
        c = create_activity(db, name="Routine", kind=ActivityKind.container,
                            created_date=CREATED)
        child = _activity(db, parent_id=c.id)
        goal = goal_svc.create_goal(db, "Mornings")
        goal_svc.link_activity(db, goal.id, child.id)
        with pytest.raises(DoubleCountedLinkError):
            goal_svc.link_activity(db, goal.id, c.id)

    def test_container_cannot_be_a_metric(self, db):
        c = create_activity(db, name="Routine", kind=ActivityKind.container,
                            created_date=CREATED)
        goal = goal_svc.create_goal(db, "Mornings")
        with pytest.raises(InvalidMetricLinkError):
            goal_svc.link_activity(db, goal.id, c.id, role=GoalRole.metric)

    def test_habit_links_drop_metric_parameters(self, db):
        a = _activity(db)
        goal = goal_svc.create_goal(db, "Learn")
        link = goal_svc.link_activity(db, goal.id, a.id, metric_baseline=1, metric_target=2)
        assert link.metric_baseline is None

    def test_link_belongs_to_its_goal(self, db):
        a = _activity(db)
        g1, g2 = goal_svc.create_goal(db, "One"), goal_svc.create_goal(db, "Two")
        link = goal_svc.link_activity(db, g1.id, a.id)
        with pytest.raises(GoalLinkNotFoundError):
            goal_svc.unlink_activity(db, g2.id, link.id)

    def test_delete_goal_removes_links(self, db):
        a = _activity(db)
        goal = goal_svc.create_goal(db, "Learn")
        goal_svc.link_activity(db, goal.id, a.id)
        goal_svc.delete_goal(db, goal.id)
        assert db.query(GoalActivity).count() == 0
        with pytest.raises(GoalNotFoundError):
            goal_svc.get_goal(db, goal.id)


class TestGoalMetrics:
    def test_score_and_progress_from_one_read(self, db):
        run = _activity(db, name="Run")
        rest = _activity(db, name="Stretch")
        weight = _activity(db, name="Weight", kind=ActivityKind.metric)
        for d in range(1, 5):
            log_svc.upsert_log(db, run.id, date(2024, 1, d))
        log_svc.upsert_log(db, weight.id, date(2024, 1, 4), value=75.0)

        goal = goal_svc.create_goal(db, "Fit", deadline=date(2024, 6, 1))
        goal_svc.link_activity(db, goal.id, run.id)
        goal_svc.link_activity(db, goal.id, rest.id)
        goal_svc.link_activity(db, goal.id, weight.id, role=GoalRole.metric,
                               metric_baseline=80.0, metric_target=70.0,
                               metric_direction=MetricDirection.decrease)

        result = goal_metrics(db, goal.id, 4, date(2024, 1, 4))
        assert result.consistency.score == 0.5
        assert not result.is_paused
        (metric,) = result.metrics
        assert metric.progress == 0.5
        assert metric.latest_value == 75.0
        assert metric.trend is None
