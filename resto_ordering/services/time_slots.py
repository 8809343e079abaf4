"""
Pickup time slots.

generate_slots() turns one open interval into bookable pickup timestamps.
build_slot_groups() is what the storefront's "choose a pickup time" picker
shows: today's and tomorrow's slots, minus anything too soon, split into a
midday and an evening group per day.

Timestamps carry the restaurant's tzinfo. Stepping is done on the wall
clock, so a DST change inside an interval shifts nothing: 11:00, 11:15, ...
stay on the quarter hour.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo as TzInfo
from typing import Iterable, List, Optional

from .. import config
from .schedule import DAY_NAMES, DaySchedule
from .time_utils import crosses_midnight, sunday_first_weekday, to_minutes

logger = logging.getLogger(__name__)

PERIOD_MIDDAY = "midday"
PERIOD_EVENING = "evening"


@dataclass
class SlotGroup:
    """A labelled run of pickup slots (e.g. "Today - midi")."""

    label: str
    period: str
    day_offset: int
    slots: List[datetime] = field(default_factory=list)


def _at(day: date, minutes: int, tz: Optional[TzInfo]) -> datetime:
    return datetime.combine(day, time(minutes // 60, minutes % 60), tzinfo=tz)


def generate_slots(
    day: date,
    open_time: str,
    close_time: str,
    *,
    interval_minutes: Optional[int] = None,
    margin_minutes: Optional[int] = None,
    tz: Optional[TzInfo] = None,
) -> List[datetime]:
    """
    Generate pickup timestamps for one open interval.

    Slots start exactly at open_time on `day` and step by the interval.
    The last slot is strictly before (close - margin) so the kitchen keeps
    its preparation time. When close_time is at or before open_time the
    interval closes on the following calendar day.

    Args:
        day: Calendar date the interval opens on
        open_time: "HH:MM"
        close_time: "HH:MM"
        interval_minutes: Slot granularity (default: SLOT_INTERVAL_MINUTES)
        margin_minutes: Pre-close margin (default: PRE_CLOSE_MARGIN_MINUTES)
        tz: tzinfo attached to every timestamp

    Returns:
        Ordered timestamps; empty when the window minus margin is not positive.
    """
    if interval_minutes is None:
        interval_minutes = config.SLOT_INTERVAL_MINUTES
    if margin_minutes is None:
        margin_minutes = config.PRE_CLOSE_MARGIN_MINUTES
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be positive")

    open_minutes = to_minutes(open_time)
    close_minutes = to_minutes(close_time)

    start = _at(day, open_minutes, tz)
    close_day = day + timedelta(days=1) if crosses_midnight(open_minutes, close_minutes) else day
    limit = _at(close_day, close_minutes, tz) - timedelta(minutes=margin_minutes)

    slots = []
    cursor = start
    step = timedelta(minutes=interval_minutes)
    while cursor < limit:
        slots.append(cursor)
        cursor += step
    return slots


def _day_lookup(days: Iterable[DaySchedule]) -> dict:
    return {d.day_of_week: d for d in days}


def _day_label(offset: int, day_of_week: int) -> str:
    if offset == 0:
        return "Today"
    if offset == 1:
        return "Tomorrow"
    return DAY_NAMES[day_of_week]


def _slots_for_date(day: Optional[DaySchedule], on: date, tz, interval, margin) -> List[datetime]:
    if day is None:
        return []
    slots = []
    for time_range in day.active_slots:
        slots.extend(
            generate_slots(
                on, time_range.open, time_range.close,
                interval_minutes=interval, margin_minutes=margin, tz=tz,
            )
        )
    return slots


def build_slot_groups(
    days: Iterable[DaySchedule],
    now: datetime,
    *,
    lead_minutes: Optional[int] = None,
    horizon_days: Optional[int] = None,
    evening_hour: Optional[int] = None,
    interval_minutes: Optional[int] = None,
    margin_minutes: Optional[int] = None,
) -> List[SlotGroup]:
    """
    Build the pickup-time groups offered to a customer right now.

    `now` must be expressed in the restaurant's local time; its tzinfo is
    reused for every generated slot. Yesterday's overnight intervals that
    run past midnight contribute their remaining slots to today.

    Slots are split by clock hour alone: before `evening_hour` is midday,
    at or after it is evening. The after-midnight tail of tonight's overnight
    interval therefore lands in the day's midday group.

    Returns:
        Per day offset, the midday group then the evening group. Empty
        groups are omitted.
    """
    if lead_minutes is None:
        lead_minutes = config.MIN_LEAD_TIME_MINUTES
    if horizon_days is None:
        horizon_days = config.SLOT_HORIZON_DAYS
    if evening_hour is None:
        evening_hour = config.EVENING_BOUNDARY_HOUR

    by_day = _day_lookup(days)
    tz = now.tzinfo
    earliest = now + timedelta(minutes=lead_minutes)
    groups: List[SlotGroup] = []

    for offset in range(horizon_days):
        target = (now + timedelta(days=offset)).date()
        day_of_week = sunday_first_weekday(now + timedelta(days=offset))
        today = by_day.get(day_of_week)

        candidates = _slots_for_date(today, target, tz, interval_minutes, margin_minutes)
        if offset == 0:
            previous = by_day.get((day_of_week - 1) % 7)
            spill = _slots_for_date(previous, target - timedelta(days=1), tz, interval_minutes, margin_minutes)
            candidates.extend(s for s in spill if s.date() == target)

        available = sorted({s for s in candidates if s >= earliest})
        if not available:
            continue

        label = _day_label(offset, day_of_week)
        midday = [s for s in available if s.hour < evening_hour]
        evening = [s for s in available if s.hour >= evening_hour]

        if midday:
            qualifier = " - midi" if midday[0].hour < config.NOON_HOUR else ""
            groups.append(SlotGroup(f"{label}{qualifier}", PERIOD_MIDDAY, offset, midday))
        if evening:
            groups.append(SlotGroup(f"{label} - soir", PERIOD_EVENING, offset, evening))

    logger.debug("Built %d pickup slot groups from %s", len(groups), now.isoformat())
    return groups


def is_offered_slot(groups: Iterable[SlotGroup], requested: datetime) -> bool:
    """Whether a requested pickup time is exactly one of the offered slots."""
    return any(requested == slot for group in groups for slot in group.slots)
