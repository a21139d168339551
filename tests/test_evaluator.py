"""
Tests for the schedule evaluator and the wrapping rule.

2024-01-01 is a Monday.
"""
from datetime import date

import pytest
from pydantic import ValidationError

from cadence.engine.evaluator import Exemption, exemption, is_due, is_leaf_due
from cadence.engine.types import ActivityRecord, StoreView
from cadence.schemas.schedule import (
    AdhocSchedule,
    DailySchedule,
    IntervalSchedule,
    MonthlySchedule,
    StickySchedule,
    WeeklySchedule,
    dump_schedule,
    parse_schedule,
)


class TestIsDue:
    def test_daily_is_always_due(self):
        assert is_due(DailySchedule(), date(2024, 1, 1))
        assert is_due(DailySchedule(), date(2024, 2, 29))

    def test_weekly_matches_iso_weekdays(self):
        s = WeeklySchedule(weekdays={1, 3})
        assert is_due(s, date(2024, 1, 1))       # Monday
        assert not is_due(s, date(2024, 1, 2))   # Tuesday
        assert is_due(s, date(2024, 1, 3))       # Wednesday
        assert not is_due(s, date(2024, 1, 7))   # Sunday

    def test_weekly_sunday_is_seven(self):
        assert is_due(WeeklySchedule(weekdays={7}), date(2024, 1, 7))

    def test_interval_counts_from_anchor(self):
        s = IntervalSchedule(every_n_days=3, anchor_date=date(2024, 1, 1))
        assert is_due(s, date(2024, 1, 1))
        assert not is_due(s, date(2024, 1, 2))
        assert not is_due(s, date(2024, 1, 3))
        assert is_due(s, date(2024, 1, 4))
        assert is_due(s, date(2024, 1, 31))

    def test_interval_never_due_before_anchor(self):
        s = IntervalSchedule(every_n_days=3, anchor_date=date(2024, 1, 1))
        assert not is_due(s, date(2023, 12, 29))

    def test_monthly_days(self):
        s = MonthlySchedule(month_days={1, 15})
        assert is_due(s, date(2024, 3, 1))
        assert is_due(s, date(2024, 3, 15))
        assert not is_due(s, date(2024, 3, 16))

    def test_monthly_clamps_to_last_day_of_short_month(self):
        s = MonthlySchedule(month_days={31})
        assert is_due(s, date(2024, 2, 29))
        assert not is_due(s, date(2024, 2, 28))
        assert is_due(s, date(2024, 4, 30))
        assert is_due(s, date(2024, 5, 31))
        assert not is_due(s, date(2024, 5, 30))

    def test_sticky_is_always_due(self):
        assert is_due(StickySchedule(), date(2030, 6, 1))

    def test_adhoc_only_on_its_date(self):
        s = AdhocSchedule(specific_date=date(2024, 1, 5))
        assert is_due(s, date(2024, 1, 5))
        assert not is_due(s, date(2024, 1, 6))

    def test_weekly_requires_a_weekday(self):
        with pytest.raises(ValidationError):
            WeeklySchedule(weekdays=set())

    def test_interval_rejects_zero(self):
        with pytest.raises(ValidationError):
            IntervalSchedule(every_n_days=0, anchor_date=date(2024, 1, 1))


class TestScheduleStorage:
    def test_missing_data_reads_as_daily(self):
        assert isinstance(parse_schedule(None), DailySchedule)

    def test_unreadable_data_reads_as_daily(self):
        assert isinstance(parse_schedule('{"type": "fortnightly"}'), DailySchedule)

    def test_stored_weekly_schedule_keeps_weekdays(self):
        restored = parse_schedule(dump_schedule(WeeklySchedule(weekdays={2, 5})))
        assert isinstance(restored, WeeklySchedule)
        assert restored.weekdays == frozenset({2, 5})


class TestWrappingRule:
    def _activity(self, **kw) -> ActivityRecord:
        kw.setdefault("created_date", date(2024, 1, 1))
        return ActivityRecord(id=1, name="Read", **kw)

    def test_vacation_overrides_schedule(self):
        a = self._activity()
        assert exemption(a, date(2024, 1, 3), {date(2024, 1, 3)}) == Exemption.VACATION
        view = StoreView.build([a], vacation_days=[date(2024, 1, 3)])
        assert not is_leaf_due(a, date(2024, 1, 3), view)
        assert is_leaf_due(a, date(2024, 1, 4), view)

    def test_not_due_before_created(self):
        a = self._activity()
        assert exemption(a, date(2023, 12, 31), ()) == Exemption.NOT_CREATED

    def test_stop_day_is_still_active(self):
        a = self._activity(stopped_at=date(2024, 1, 10))
        assert exemption(a, date(2024, 1, 10), ()) is None
        assert exemption(a, date(2024, 1, 11), ()) == Exemption.STOPPED

    def test_unknown_schedule_type_raises(self):
        with pytest.raises(TypeError):
            is_due(object(), date(2024, 1, 1))
