"""Tests for current and longest streaks."""
from datetime import date, timedelta

from cadence.engine.streaks import current_streak, longest_streak
from cadence.engine.types import ActivityRecord, LogRecord, LogStatus, StoreView
from cadence.schemas.schedule import StickySchedule, WeeklySchedule

START = date(2024, 1, 1)


def _activity(**kw) -> ActivityRecord:
    kw.setdefault("created_date", START)
    return ActivityRecord(id=1, name="Read", **kw)


def _logs(days, status=LogStatus.completed) -> list[LogRecord]:
    return [LogRecord(activity_id=1, day=d, status=status) for d in days]


def _span(first: int, last: int) -> list[date]:
    return [date(2024, 1, d) for d in range(first, last + 1)]


def test_open_reference_day_does_not_break_the_streak():
    a = _activity()
    view = StoreView.build([a], _logs(_span(1, 5) + _span(7, 9)))
    assert current_streak(a, view, date(2024, 1, 10)) == 3
    assert longest_streak(a, view, date(2024, 1, 10)) == 5


def test_completed_reference_day_counts():
    a = _activity()
    view = StoreView.build([a], _logs(_span(7, 10)))
    assert current_streak(a, view, date(2024, 1, 10)) == 4


def test_skipped_day_passes_through():
    a = _activity()
    logs = _logs(_span(1, 2) + [date(2024, 1, 4)]) + _logs(
        [date(2024, 1, 3)], LogStatus.skipped
    )
    view = StoreView.build([a], logs)
    assert current_streak(a, view, date(2024, 1, 4)) == 3


def test_vacation_day_passes_through():
    a = _activity()
    view = StoreView.build([a], _logs([date(2024, 1, 1), date(2024, 1, 3)]),
                           vacation_days=[date(2024, 1, 2)])
    assert current_streak(a, view, date(2024, 1, 3)) == 2


def test_days_not_due_pass_through():
    a = _activity(schedule=WeeklySchedule(weekdays={1}))
    mondays = [START + timedelta(weeks=i) for i in range(3)]
    view = StoreView.build([a], _logs(mondays))
    assert current_streak(a, view, date(2024, 1, 20)) == 3


def test_missed_day_breaks_the_streak():
    a = _activity()
    view = StoreView.build([a], _logs(_span(1, 3)))
    assert current_streak(a, view, date(2024, 1, 6)) == 0
    assert longest_streak(a, view, date(2024, 1, 6)) == 3


def test_sticky_activity_has_no_streak():
    a = _activity(schedule=StickySchedule())
    view = StoreView.build([a], _logs(_span(1, 3)))
    assert current_streak(a, view, date(2024, 1, 3)) == 0
    assert longest_streak(a, view, date(2024, 1, 3)) == 0
