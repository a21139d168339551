"""Tests for the trailing-window completion rate."""
from datetime import date, timedelta

from cadence.engine.rates import completion_breakdown, completion_rate, window
from cadence.engine.types import (
    ActivityKind,
    ActivityRecord,
    ConfigSnapshotRecord,
    LogRecord,
    LogStatus,
    StoreView,
)
from cadence.schemas.schedule import (
    AdhocSchedule,
    DailySchedule,
    StickySchedule,
    WeeklySchedule,
)

START = date(2024, 1, 1)   # Monday


def _daily(**kw) -> ActivityRecord:
    kw.setdefault("created_date", START)
    return ActivityRecord(id=1, name="Read", **kw)


def _completed(*days) -> list[LogRecord]:
    return [LogRecord(activity_id=1, day=d, status=LogStatus.completed) for d in days]


def test_window_is_oldest_first_and_ends_on_reference():
    days = window(date(2024, 1, 10), 3)
    assert days == [date(2024, 1, 8), date(2024, 1, 9), date(2024, 1, 10)]


def test_seven_of_ten_days():
    a = _daily()
    logs = _completed(*(START + timedelta(days=i) for i in range(7)))
    view = StoreView.build([a], logs)
    assert completion_rate(a, 10, view, date(2024, 1, 10)) == 0.7


def test_nothing_due_gives_zero():
    a = _daily(schedule=WeeklySchedule(weekdays={1}))
    view = StoreView.build([a])
    # Tuesday through Sunday: no Monday in the window.
    assert completion_rate(a, 6, view, date(2024, 1, 7)) == 0.0


def test_days_before_creation_are_not_due():
    a = _daily(created_date=date(2024, 1, 6))
    view = StoreView.build([a], _completed(date(2024, 1, 6)))
    breakdown = completion_breakdown(a, 10, view, date(2024, 1, 10))
    assert breakdown.due_days == 5
    assert breakdown.completed_days == 1


def test_vacation_days_leave_the_denominator():
    a = _daily()
    view = StoreView.build(
        [a],
        _completed(date(2024, 1, 1), date(2024, 1, 2)),
        vacation_days=[date(2024, 1, 3), date(2024, 1, 4)],
    )
    assert completion_rate(a, 4, view, date(2024, 1, 4)) == 1.0


def test_skipped_days_count_as_due_but_not_done():
    a = _daily()
    logs = _completed(date(2024, 1, 1), date(2024, 1, 2)) + [
        LogRecord(activity_id=1, day=date(2024, 1, 3), status=LogStatus.skipped),
    ]
    breakdown = completion_breakdown(a, 4, StoreView.build([a], logs), date(2024, 1, 4))
    assert breakdown.rate == 0.5
    assert breakdown.skipped_days == 1
    assert breakdown.due_days == 4


def test_logs_on_days_that_were_not_due_are_ignored():
    a = _daily(schedule=WeeklySchedule(weekdays={1}))
    view = StoreView.build([a], _completed(date(2024, 1, 1), date(2024, 1, 2)))
    breakdown = completion_breakdown(a, 7, view, date(2024, 1, 7))
    assert breakdown.due_days == 1
    assert breakdown.rate == 1.0


def test_history_uses_the_schedule_in_force_each_day():
    # Mondays only until 2024-01-07, daily afterwards.
    snap = ConfigSnapshotRecord(
        id=1, activity_id=1,
        effective_from=date(2024, 1, 1), effective_until=date(2024, 1, 7),
        kind=ActivityKind.checkbox, schedule=WeeklySchedule(weekdays={1}),
    )
    a = _daily(schedule=DailySchedule(), snapshots=(snap,))
    view = StoreView.build([a], _completed(date(2024, 1, 1), date(2024, 1, 8)))
    breakdown = completion_breakdown(a, 10, view, date(2024, 1, 10))
    assert breakdown.due_days == 4
    assert breakdown.rate == 0.5


def test_sticky_and_adhoc_have_no_rate():
    sticky = _daily(schedule=StickySchedule())
    adhoc = _daily(schedule=AdhocSchedule(specific_date=date(2024, 1, 3)))
    assert completion_rate(sticky, 7, StoreView.build([sticky]), date(2024, 1, 7)) is None
    assert completion_rate(adhoc, 7, StoreView.build([adhoc]), date(2024, 1, 7)) is None


def test_breakdown_has_one_entry_per_window_day():
    a = _daily()
    breakdown = completion_breakdown(a, 14, StoreView.build([a]), date(2024, 1, 14))
    assert len(breakdown.days) == 14
    assert breakdown.days[0].day == date(2024, 1, 1)
    assert breakdown.days[-1].day == date(2024, 1, 14)


def test_container_rate_follows_its_children():
    container = ActivityRecord(
        id=10, name="Routine", created_date=START, kind=ActivityKind.container,
    )
    child = ActivityRecord(id=1, name="Stretch", created_date=START, parent_id=10)
    logs = _completed(date(2024, 1, 1), date(2024, 1, 2))
    view = StoreView.build([container, child], logs)
    assert completion_rate(container, 4, view, date(2024, 1, 4)) == 0.5


def test_container_with_a_one_shot_schedule_still_has_a_rate():
    container = ActivityRecord(
        id=10, name="Routine", created_date=START, kind=ActivityKind.container,
        schedule=AdhocSchedule(specific_date=START),
    )
    child = ActivityRecord(id=1, name="Stretch", created_date=START, parent_id=10)
    logs = _completed(*(START + timedelta(days=i) for i in range(4)))
    view = StoreView.build([container, child], logs)
    assert completion_rate(container, 4, view, date(2024, 1, 4)) == 1.0
