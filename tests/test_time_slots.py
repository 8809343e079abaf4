"""
Tests for pickup slot generation and grouping.
"""
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from resto_ordering.services.schedule import DaySchedule, TimeRange
from resto_ordering.services.time_slots import (
    PERIOD_EVENING,
    PERIOD_MIDDAY,
    build_slot_groups,
    generate_slots,
    is_offered_slot,
)

PARIS = ZoneInfo("Europe/Paris")


def _day(day_of_week, *ranges, is_open=True):
    return DaySchedule(day_of_week, is_open, [TimeRange(o, c) for o, c in ranges])


class TestGenerateSlots:
    """Slots for a single open interval."""

    def test_lunch_window(self):
        slots = generate_slots(date(2024, 6, 10), "11:00", "14:30", interval_minutes=15, margin_minutes=15)

        assert slots[0] == datetime(2024, 6, 10, 11, 0)
        assert slots[-1] == datetime(2024, 6, 10, 14, 0)
        assert len(slots) == 13

    def test_slots_step_by_interval(self):
        slots = generate_slots(date(2024, 6, 10), "11:00", "12:00", interval_minutes=10, margin_minutes=15)

        gaps = {b - a for a, b in zip(slots, slots[1:])}
        assert gaps == {timedelta(minutes=10)}

    def test_last_slot_strictly_before_close_minus_margin(self):
        slots = generate_slots(date(2024, 6, 10), "18:00", "22:00", interval_minutes=15, margin_minutes=15)

        assert slots[-1] == datetime(2024, 6, 10, 21, 30)
        assert all(s < datetime(2024, 6, 10, 21, 45) for s in slots)

    def test_overnight_interval_continues_next_day(self):
        slots = generate_slots(date(2024, 6, 10), "23:00", "02:00", interval_minutes=15, margin_minutes=15)

        assert slots[0] == datetime(2024, 6, 10, 23, 0)
        assert slots[-1].date() == date(2024, 6, 11)
        assert slots[-1] <= datetime(2024, 6, 11, 1, 45)
        assert slots[-1] == datetime(2024, 6, 11, 1, 30)
        assert slots == sorted(slots)

    def test_window_shorter_than_margin_is_empty(self):
        assert generate_slots(date(2024, 6, 10), "11:00", "11:10", interval_minutes=15, margin_minutes=15) == []

    def test_window_equal_to_margin_is_empty(self):
        assert generate_slots(date(2024, 6, 10), "11:00", "11:15", interval_minutes=15, margin_minutes=15) == []

    def test_window_just_past_margin_has_opening_slot(self):
        slots = generate_slots(date(2024, 6, 10), "11:00", "11:20", interval_minutes=15, margin_minutes=15)

        assert slots == [datetime(2024, 6, 10, 11, 0)]

    def test_timezone_is_attached(self):
        slots = generate_slots(date(2024, 6, 10), "11:00", "12:00", tz=PARIS)

        assert all(s.tzinfo is PARIS for s in slots)

    def test_defaults_come_from_config(self, monkeypatch):
        monkeypatch.setattr("resto_ordering.config.SLOT_INTERVAL_MINUTES", 30)
        monkeypatch.setattr("resto_ordering.config.PRE_CLOSE_MARGIN_MINUTES", 0)

        slots = generate_slots(date(2024, 6, 10), "11:00", "12:00")

        assert slots == [datetime(2024, 6, 10, 11, 0), datetime(2024, 6, 10, 11, 30)]

    def test_non_positive_interval_rejected(self):
        with pytest.raises(ValueError):
            generate_slots(date(2024, 6, 10), "11:00", "12:00", interval_minutes=0)


class TestBuildSlotGroups:
    """Grouping of today's and tomorrow's slots into service periods."""

    # Monday (1) and Tuesday (2) with split service
    WEEK = [
        _day(1, ("11:00", "14:30"), ("18:00", "22:00")),
        _day(2, ("11:00", "14:30"), ("18:00", "22:00")),
    ]

    def _groups(self, days, now, **kwargs):
        kwargs.setdefault("lead_minutes", 20)
        kwargs.setdefault("horizon_days", 2)
        kwargs.setdefault("evening_hour", 15)
        kwargs.setdefault("interval_minutes", 15)
        kwargs.setdefault("margin_minutes", 15)
        return build_slot_groups(days, now, **kwargs)

    def test_today_and_tomorrow_groups(self):
        now = datetime(2024, 6, 10, 12, 0, tzinfo=PARIS)

        groups = self._groups(self.WEEK, now)

        assert [g.label for g in groups] == ["Today", "Today - soir", "Tomorrow - midi", "Tomorrow - soir"]
        assert [g.period for g in groups] == [PERIOD_MIDDAY, PERIOD_EVENING, PERIOD_MIDDAY, PERIOD_EVENING]
        assert [g.day_offset for g in groups] == [0, 0, 1, 1]

    def test_lead_time_filters_near_slots(self):
        now = datetime(2024, 6, 10, 12, 0, tzinfo=PARIS)

        groups = self._groups(self.WEEK, now)

        assert groups[0].slots[0] == datetime(2024, 6, 10, 12, 30, tzinfo=PARIS)
        assert all(s >= now + timedelta(minutes=20) for g in groups for s in g.slots)

    def test_groups_are_chronological(self):
        now = datetime(2024, 6, 10, 9, 0, tzinfo=PARIS)

        groups = self._groups(self.WEEK, now)
        flat = [s for g in groups for s in g.slots]

        assert flat == sorted(flat)
        assert len(flat) == len(set(flat))

    def test_midday_label_when_service_starts_before_noon(self):
        now = datetime(2024, 6, 10, 9, 0, tzinfo=PARIS)

        groups = self._groups(self.WEEK, now)

        assert groups[0].label == "Today - midi"
        assert groups[0].slots[0] == datetime(2024, 6, 10, 11, 0, tzinfo=PARIS)

    def test_passed_service_is_omitted(self):
        now = datetime(2024, 6, 10, 16, 0, tzinfo=PARIS)

        groups = self._groups(self.WEEK, now)

        assert [g.label for g in groups] == ["Today - soir", "Tomorrow - midi", "Tomorrow - soir"]

    def test_horizon_limits_days(self):
        now = datetime(2024, 6, 10, 12, 0, tzinfo=PARIS)

        groups = self._groups(self.WEEK, now, horizon_days=1)

        assert {g.day_offset for g in groups} == {0}

    def test_closed_days_have_no_groups(self):
        now = datetime(2024, 6, 10, 12, 0, tzinfo=PARIS)
        days = [_day(1, ("11:00", "14:30"), is_open=False), _day(2, ("11:00", "14:30"), is_open=False)]

        assert self._groups(days, now) == []

    def test_after_midnight_slots_are_grouped_by_hour(self):
        now = datetime(2024, 6, 10, 20, 0, tzinfo=PARIS)
        days = [_day(1, ("23:00", "02:00"))]

        groups = self._groups(days, now, horizon_days=1)
        midday = [g for g in groups if g.period == PERIOD_MIDDAY]
        evening = [g for g in groups if g.period == PERIOD_EVENING]

        assert [g.period for g in groups] == [PERIOD_MIDDAY, PERIOD_EVENING]
        assert midday[0].label == "Today - midi"
        assert midday[0].slots[0] == datetime(2024, 6, 11, 0, 0, tzinfo=PARIS)
        assert midday[0].slots[-1] == datetime(2024, 6, 11, 1, 30, tzinfo=PARIS)
        assert evening[0].label == "Today - soir"
        assert evening[0].slots == [
            datetime(2024, 6, 10, 23, 0, tzinfo=PARIS),
            datetime(2024, 6, 10, 23, 15, tzinfo=PARIS),
            datetime(2024, 6, 10, 23, 30, tzinfo=PARIS),
            datetime(2024, 6, 10, 23, 45, tzinfo=PARIS),
        ]
        assert all(s.hour < 15 for s in midday[0].slots)

    def test_yesterdays_overnight_slots_offered_after_midnight(self):
        # Monday 00:10, Sunday (0) is open until 02:00
        now = datetime(2024, 6, 10, 0, 10, tzinfo=PARIS)
        days = [_day(0, ("23:00", "02:00"))]

        groups = self._groups(days, now)
        flat = [s for g in groups for s in g.slots]

        assert flat[0] == datetime(2024, 6, 10, 0, 30, tzinfo=PARIS)
        assert flat[-1] == datetime(2024, 6, 10, 1, 30, tzinfo=PARIS)
        assert all(g.day_offset == 0 for g in groups)

    def test_open_all_day_marker(self):
        now = datetime(2024, 6, 10, 12, 0, tzinfo=PARIS)
        days = [_day(1, ("00:00", "00:00"))]

        groups = self._groups(days, now, horizon_days=1)
        flat = [s for g in groups for s in g.slots]

        assert flat[0] == datetime(2024, 6, 10, 12, 30, tzinfo=PARIS)
        assert flat[-1] == datetime(2024, 6, 10, 23, 30, tzinfo=PARIS)


class TestIsOfferedSlot:

    def test_offered_and_not_offered(self):
        now = datetime(2024, 6, 10, 12, 0, tzinfo=PARIS)
        groups = build_slot_groups([_day(1, ("18:00", "22:00"))], now, horizon_days=1)

        assert is_offered_slot(groups, datetime(2024, 6, 10, 18, 15, tzinfo=PARIS))
        assert not is_offered_slot(groups, datetime(2024, 6, 10, 18, 10, tzinfo=PARIS))
        assert not is_offered_slot(groups, datetime(2024, 6, 10, 21, 45, tzinfo=PARIS))

    def test_same_instant_in_other_timezone_matches(self):
        now = datetime(2024, 6, 10, 12, 0, tzinfo=PARIS)
        groups = build_slot_groups([_day(1, ("18:00", "22:00"))], now, horizon_days=1)

        utc_instant = datetime(2024, 6, 10, 16, 0, tzinfo=ZoneInfo("UTC"))
        assert is_offered_slot(groups, utc_instant)
