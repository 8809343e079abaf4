"""
Weekly Schedule Model
=====================

A restaurant's opening hours: exactly seven DaySchedule entries indexed by
day of week (0=Sunday..6=Saturday). Each open day holds one or more
time-ordered, non-overlapping intervals, which allows split service such as
lunch 11:00-14:30 plus dinner 17:30-22:30.

Overnight Intervals:
--------------------
An interval whose close is at or before its open ("23:00" -> "02:00")
closes on the following calendar day. A close equal to the open is a full
24-hour window. Evaluators (availability, slot generation) must treat these
explicitly; this module only validates them.

Storage Shape:
--------------
Rows in restaurant_hours carry (day_of_week, is_open, slots) where slots is
a JSON list of {"open": "HH:MM", "close": "HH:MM"}. schedule_from_rows()
and schedule_to_rows() convert between the rows and the model.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .time_utils import MINUTES_PER_DAY, crosses_midnight, from_minutes, to_minutes

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# Display order for the dashboard and formatted hours
MONDAY_FIRST = [1, 2, 3, 4, 5, 6, 0]


class ScheduleValidationError(ValueError):
    """Raised when a schedule breaks the weekly schedule invariants."""


@dataclass(frozen=True)
class TimeRange:
    """One open interval of a day, as zero-padded "HH:MM" strings."""

    open: str
    close: str

    @property
    def open_minutes(self) -> int:
        return to_minutes(self.open)

    @property
    def close_minutes(self) -> int:
        return to_minutes(self.close)

    @property
    def is_overnight(self) -> bool:
        return crosses_midnight(self.open_minutes, self.close_minutes)

    @property
    def end_minutes(self) -> int:
        """Close measured from the opening day's midnight (may exceed 24h)."""
        close = self.close_minutes
        return close + MINUTES_PER_DAY if self.is_overnight else close

    def to_dict(self) -> Dict[str, str]:
        return {"open": self.open, "close": self.close}


@dataclass
class DaySchedule:
    day_of_week: int
    is_open: bool = False
    slots: List[TimeRange] = field(default_factory=list)

    @property
    def active_slots(self) -> List[TimeRange]:
        """Slots that count: none at all when the day is closed."""
        return list(self.slots) if self.is_open else []


def make_range(open_time: str, close_time: str) -> TimeRange:
    """Build a TimeRange from loose "H:MM" input, normalizing to "HH:MM"."""
    try:
        return TimeRange(from_minutes(to_minutes(open_time)), from_minutes(to_minutes(close_time)))
    except ValueError as exc:
        raise ScheduleValidationError(str(exc)) from exc


def validate_day(day: DaySchedule) -> None:
    """
    Check one day against the schedule invariants.

    Raises:
        ScheduleValidationError: day_of_week outside 0-6, or slots that are
            out of order or overlap (an overnight slot must be the last one).
    """
    if not isinstance(day.day_of_week, int) or not 0 <= day.day_of_week < DAYS_PER_WEEK:
        raise ScheduleValidationError(f"Invalid day of week: {day.day_of_week!r}")

    previous: Optional[TimeRange] = None
    for slot in day.slots:
        try:
            start, _ = slot.open_minutes, slot.close_minutes
        except ValueError as exc:
            raise ScheduleValidationError(f"{DAY_NAMES[day.day_of_week]}: {exc}") from exc
        if previous is not None:
            if start <= previous.open_minutes:
                raise ScheduleValidationError(
                    f"{DAY_NAMES[day.day_of_week]}: slots must be in time order"
                )
            if start < previous.end_minutes:
                raise ScheduleValidationError(
                    f"{DAY_NAMES[day.day_of_week]}: slot {slot.open}-{slot.close} overlaps "
                    f"{previous.open}-{previous.close}"
                )
        previous = slot


def validate_schedule(days: Iterable[DaySchedule]) -> List[DaySchedule]:
    """
    Validate a complete week and return it sorted by day of week.

    Raises:
        ScheduleValidationError: if any day is invalid, or days are missing
            or duplicated.
    """
    days = list(days)
    seen = set()
    for day in days:
        validate_day(day)
        if day.day_of_week in seen:
            raise ScheduleValidationError(f"Duplicate entry for {DAY_NAMES[day.day_of_week]}")
        seen.add(day.day_of_week)

    missing = [DAY_NAMES[d] for d in range(DAYS_PER_WEEK) if d not in seen]
    if missing:
        raise ScheduleValidationError(f"Missing days: {', '.join(missing)}")

    return sorted(days, key=lambda d: d.day_of_week)


def closed_day(day_of_week: int) -> DaySchedule:
    return DaySchedule(day_of_week=day_of_week, is_open=False, slots=[])


def normalize_week(days: Iterable[DaySchedule]) -> List[DaySchedule]:
    """Fill gaps so exactly seven days come back, missing days closed."""
    by_day = {d.day_of_week: d for d in days}
    return [by_day.get(d) or closed_day(d) for d in range(DAYS_PER_WEEK)]


def default_schedule() -> List[DaySchedule]:
    """Starting hours for a new restaurant: 11:00-23:00 except Sunday."""
    return [
        DaySchedule(
            day_of_week=d,
            is_open=d != 0,
            slots=[TimeRange("11:00", "23:00")],
        )
        for d in range(DAYS_PER_WEEK)
    ]


def copy_day_to_all(days: List[DaySchedule], source_day: int = 1) -> List[DaySchedule]:
    """Apply one day's open flag and slots to the whole week (Monday by default)."""
    week = normalize_week(days)
    source = week[source_day]
    return [
        DaySchedule(day_of_week=d.day_of_week, is_open=source.is_open, slots=list(source.slots))
        for d in week
    ]


def schedule_from_rows(rows: Iterable[Any]) -> List[DaySchedule]:
    """
    Build DaySchedule entries from restaurant_hours rows.

    Returns only the days that have a row; an empty list means the restaurant
    has no schedule at all (availability falls back to the manual flag).
    Malformed stored slots are dropped with a warning rather than failing the
    whole read.
    """
    days = []
    for row in rows:
        slots = []
        for raw in row.slots or []:
            try:
                slots.append(make_range(raw["open"], raw["close"]))
            except (KeyError, TypeError, ScheduleValidationError):
                logger.warning(
                    "Dropping malformed stored slot %r for day %s", raw, row.day_of_week
                )
        days.append(DaySchedule(day_of_week=row.day_of_week, is_open=bool(row.is_open), slots=slots))
    return sorted(days, key=lambda d: d.day_of_week)


def schedule_to_rows(days: Iterable[DaySchedule]) -> List[Dict[str, Any]]:
    """Column values for restaurant_hours rows."""
    return [
        {
            "day_of_week": d.day_of_week,
            "is_open": d.is_open,
            "slots": [s.to_dict() for s in d.slots],
        }
        for d in days
    ]
