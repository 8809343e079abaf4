"""
Tests for the weekly schedule model and its validation.
"""
import logging
from types import SimpleNamespace

import pytest

from resto_ordering.services.schedule import (
    DaySchedule,
    ScheduleValidationError,
    TimeRange,
    copy_day_to_all,
    default_schedule,
    make_range,
    normalize_week,
    schedule_from_rows,
    schedule_to_rows,
    validate_day,
    validate_schedule,
)
from resto_ordering.services.time_utils import (
    crosses_midnight,
    from_minutes,
    sunday_first_weekday,
    to_minutes,
)


def _week(**overrides):
    days = {d: DaySchedule(d, True, [TimeRange("11:00", "14:30")]) for d in range(7)}
    days.update(overrides)
    return list(days.values())


class TestTimeHelpers:

    def test_to_minutes_and_back(self):
        assert to_minutes("00:00") == 0
        assert to_minutes("23:59") == 1439
        assert to_minutes("9:05") == 545
        assert from_minutes(545) == "09:05"

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "", "1230"])
    def test_to_minutes_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            to_minutes(value)

    def test_crosses_midnight(self):
        assert crosses_midnight(to_minutes("23:00"), to_minutes("02:00"))
        assert crosses_midnight(to_minutes("00:00"), to_minutes("00:00"))
        assert not crosses_midnight(to_minutes("11:00"), to_minutes("14:30"))

    def test_sunday_first_weekday(self):
        from datetime import datetime

        assert sunday_first_weekday(datetime(2024, 6, 9)) == 0  # Sunday
        assert sunday_first_weekday(datetime(2024, 6, 10)) == 1  # Monday
        assert sunday_first_weekday(datetime(2024, 6, 15)) == 6  # Saturday


class TestTimeRange:

    def test_make_range_normalizes(self):
        assert make_range("9:00", "14:30") == TimeRange("09:00", "14:30")

    def test_make_range_rejects_bad_value(self):
        with pytest.raises(ScheduleValidationError):
            make_range("11:00", "25:00")

    def test_overnight_end_minutes(self):
        slot = TimeRange("23:00", "02:00")
        assert slot.is_overnight
        assert slot.end_minutes == 26 * 60

    def test_closed_day_has_no_active_slots(self):
        day = DaySchedule(1, False, [TimeRange("11:00", "14:30")])
        assert day.active_slots == []


class TestValidation:

    def test_split_service_is_valid(self):
        validate_day(DaySchedule(1, True, [TimeRange("11:00", "14:30"), TimeRange("17:30", "22:30")]))

    def test_overnight_last_slot_is_valid(self):
        validate_day(DaySchedule(5, True, [TimeRange("11:00", "14:30"), TimeRange("19:00", "02:00")]))

    def test_overlapping_slots_rejected(self):
        day = DaySchedule(1, True, [TimeRange("11:00", "15:00"), TimeRange("14:30", "22:00")])
        with pytest.raises(ScheduleValidationError, match="overlaps"):
            validate_day(day)

    def test_slot_after_overnight_rejected(self):
        day = DaySchedule(1, True, [TimeRange("18:00", "01:00"), TimeRange("23:00", "23:30")])
        with pytest.raises(ScheduleValidationError):
            validate_day(day)

    def test_unordered_slots_rejected(self):
        day = DaySchedule(1, True, [TimeRange("17:30", "22:30"), TimeRange("11:00", "14:30")])
        with pytest.raises(ScheduleValidationError, match="time order"):
            validate_day(day)

    @pytest.mark.parametrize("day_of_week", [-1, 7])
    def test_day_of_week_out_of_range(self, day_of_week):
        with pytest.raises(ScheduleValidationError):
            validate_day(DaySchedule(day_of_week, False, []))

    def test_full_week_sorted(self):
        week = validate_schedule(reversed(_week()))
        assert [d.day_of_week for d in week] == list(range(7))

    def test_missing_day_rejected(self):
        with pytest.raises(ScheduleValidationError, match="Missing"):
            validate_schedule(_week()[:6])

    def test_duplicate_day_rejected(self):
        with pytest.raises(ScheduleValidationError):
            validate_schedule(_week() + [DaySchedule(3, False, [])])


class TestWeekHelpers:

    def test_default_schedule(self):
        week = default_schedule()

        assert len(week) == 7
        assert week[0].is_open is False
        assert all(d.is_open for d in week[1:])
        assert all(d.slots == [TimeRange("11:00", "23:00")] for d in week)

    def test_normalize_week_fills_closed_days(self):
        week = normalize_week([DaySchedule(3, True, [TimeRange("11:00", "14:00")])])

        assert [d.day_of_week for d in week] == list(range(7))
        assert week[3].is_open
        assert not any(d.is_open for d in week if d.day_of_week != 3)

    def test_copy_monday_to_all(self):
        monday = DaySchedule(1, True, [TimeRange("11:00", "14:30"), TimeRange("17:30", "22:30")])

        week = copy_day_to_all([monday, DaySchedule(0, False, [])])

        assert len(week) == 7
        for day in week:
            assert day.is_open
            assert day.slots == monday.slots

    def test_copy_other_source_day(self):
        saturday = DaySchedule(6, False, [])

        week = copy_day_to_all([saturday, DaySchedule(1, True, [TimeRange("11:00", "14:30")])], source_day=6)

        assert not any(d.is_open for d in week)

    def test_rows_round_trip(self):
        rows = [
            SimpleNamespace(day_of_week=d["day_of_week"], is_open=d["is_open"], slots=d["slots"])
            for d in schedule_to_rows(default_schedule())
        ]

        assert schedule_from_rows(rows) == default_schedule()

    def test_malformed_stored_slot_dropped(self, caplog):
        caplog.set_level(logging.WARNING, logger="resto_ordering")
        rows = [
            SimpleNamespace(day_of_week=1, is_open=True, slots=[{"open": "11:00", "close": "14:30"}, {"open": "bad"}]),
        ]

        days = schedule_from_rows(rows)

        assert days == [DaySchedule(1, True, [TimeRange("11:00", "14:30")])]
        assert "malformed" in caplog.text

    def test_no_rows_means_no_schedule(self):
        assert schedule_from_rows([]) == []
