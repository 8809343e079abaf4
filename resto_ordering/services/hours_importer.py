"""
External Hours Importer
=======================

Seeds a restaurant's weekly schedule from the free-text opening hours of a
place listing (the `weekday_text` array of a place-details lookup). Listings
come back in English or French depending on the account locale:

    "Monday: 11:00 AM – 2:30 PM, 5:30 – 10:30 PM"
    "lundi: 11:00 – 14:30, 17:30 – 22:30"
    "Sunday: Closed"
    "dimanche: Fermé"
    "Saturday: Open 24 hours"

Parsing Rules:
--------------
- "<DayName>: <ranges>", day names matched case-insensitively
- Closed markers disable the day; "open 24 hours" markers produce a single
  00:00-00:00 interval (a full day under the overnight encoding)
- Ranges are comma-separated; each splits on an en/em dash, a hyphen, or
  the word "to"
- Endpoints are 24-hour ("14:30", "14h30") or 12-hour ("2:30 PM")
- A meridiem written only on the closing endpoint carries over to a 12-hour
  opening endpoint ("5:30 – 10:30 PM" opens at 17:30), except when carrying
  PM over would open after the close ("11:00 – 2:30 PM" opens at 11:00)

Anything unusable is skipped and logged, never raised: an unknown day name
skips the line, an unsplittable range skips that interval. Days that end up
with no line are closed. Unknown data never turns into "open".
"""

import logging
import re
from typing import Iterable, List, Optional, Tuple

from .schedule import (
    DAY_NAMES,
    DAYS_PER_WEEK,
    MONDAY_FIRST,
    DaySchedule,
    TimeRange,
    closed_day,
)
from .time_utils import from_minutes

logger = logging.getLogger(__name__)

# Importer output has the same shape as a stored day
ParsedScheduleDay = DaySchedule

DAY_NAME_TO_INDEX = {
    "sunday": 0, "dimanche": 0,
    "monday": 1, "lundi": 1,
    "tuesday": 2, "mardi": 2,
    "wednesday": 3, "mercredi": 3,
    "thursday": 4, "jeudi": 4,
    "friday": 5, "vendredi": 5,
    "saturday": 6, "samedi": 6,
}

CLOSED_MARKERS = ("closed", "fermé", "ferme", "fermée", "fermee")

OPEN_ALL_DAY_MARKERS = ("open 24 hours", "ouvert 24h/24", "ouvert 24 h/24", "24 hours")

# Listings use narrow/thin no-break spaces around meridiems and dashes
_SPACE_VARIANTS = re.compile(r"[\u00a0\u2009\u202f]")

_RANGE_SEPARATOR = re.compile(r"\s*[–—]\s*|\s*-\s*|\s+to\s+", re.IGNORECASE)

_ENDPOINT = re.compile(
    r"^(?P<hour>\d{1,2})(?:\s*[:h]\s*(?P<minute>\d{2}))?\s*(?P<meridiem>[ap]\.?\s?m\.?)?$",
    re.IGNORECASE,
)

Endpoint = Tuple[int, int, Optional[str]]


def _parse_endpoint(raw: str) -> Optional[Endpoint]:
    """Split "2:30 PM" into (2, 30, "pm"); None if it is not a time."""
    match = _ENDPOINT.match(raw.strip())
    if not match:
        return None
    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    meridiem = match.group("meridiem")
    if meridiem:
        meridiem = "pm" if meridiem.lower().startswith("p") else "am"
        if not 1 <= hour <= 12:
            return None
    elif hour > 24 or (hour == 24 and minute):
        return None
    if minute > 59:
        return None
    return hour, minute, meridiem


def to_24h(hour: int, minute: int, meridiem: Optional[str]) -> int:
    """
    Minutes since midnight for a parsed endpoint.

    12 AM is 00, 12 PM stays 12, other PM hours add 12. "24:00" is midnight.
    """
    if meridiem == "pm" and hour != 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    return (hour % 24) * 60 + minute


def _parse_range(text: str) -> Optional[TimeRange]:
    parts = [p for p in _RANGE_SEPARATOR.split(text) if p.strip()]
    if len(parts) < 2:
        return None

    opening = _parse_endpoint(parts[0])
    closing = _parse_endpoint(parts[-1])
    if opening is None or closing is None:
        return None

    close_minutes = to_24h(*closing)
    open_hour, open_minute, open_meridiem = opening
    open_minutes = to_24h(*opening)

    closing_meridiem = closing[2]
    if closing_meridiem and open_meridiem is None and 1 <= open_hour <= 12:
        inherited = to_24h(open_hour, open_minute, closing_meridiem)
        if not (closing_meridiem == "pm" and inherited > close_minutes):
            open_minutes = inherited

    return TimeRange(from_minutes(open_minutes), from_minutes(close_minutes))


def parse_line(line: str) -> Optional[ParsedScheduleDay]:
    """
    Parse one "<DayName>: <ranges>" line.

    Returns:
        The parsed day, or None when the line has to be skipped.
    """
    line = _SPACE_VARIANTS.sub(" ", line or "")
    day_name, sep, rest = line.partition(":")
    if not sep:
        logger.warning("Skipping hours line without a day separator: %r", line)
        return None

    day_of_week = DAY_NAME_TO_INDEX.get(day_name.strip().lower())
    if day_of_week is None:
        logger.warning("Skipping hours line with unknown day name: %r", line)
        return None

    rest = rest.strip()
    lowered = rest.lower()
    if any(marker in lowered for marker in CLOSED_MARKERS):
        return closed_day(day_of_week)
    if any(marker in lowered for marker in OPEN_ALL_DAY_MARKERS):
        return DaySchedule(day_of_week, is_open=True, slots=[TimeRange("00:00", "00:00")])

    slots = []
    for chunk in rest.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        time_range = _parse_range(chunk)
        if time_range is None:
            logger.info("Skipping unparseable range %r for %s", chunk, DAY_NAMES[day_of_week])
            continue
        slots.append(time_range)

    if not slots:
        logger.warning("No usable time range for %s in %r", DAY_NAMES[day_of_week], line)
        return None

    slots.sort(key=lambda s: s.open_minutes)
    return DaySchedule(day_of_week, is_open=True, slots=slots)


def parse_weekly_hours(lines: Iterable[str]) -> List[ParsedScheduleDay]:
    """
    Parse place-listing weekday text into a full week.

    Lines may arrive in any order and any subset; a later line for the same
    day replaces an earlier one.

    Returns:
        Seven ParsedScheduleDay entries, index = day of week (0=Sunday).
    """
    parsed = {}
    for line in lines:
        day = parse_line(line)
        if day is not None:
            parsed[day.day_of_week] = day

    return [parsed.get(d) or closed_day(d) for d in range(DAYS_PER_WEEK)]


def format_schedule_lines(days: Iterable[DaySchedule]) -> List[str]:
    """
    Render a week as display lines, Monday first.

    Example:
        ["Monday : 11:00-14:30, 17:30-22:30", ..., "Sunday : Closed"]
    """
    by_day = {d.day_of_week: d for d in days}
    lines = []
    for index in MONDAY_FIRST:
        day = by_day.get(index)
        label = DAY_NAMES[index]
        if day is None or not day.active_slots:
            lines.append(f"{label} : Closed")
            continue
        ranges = ", ".join(f"{s.open}-{s.close}" for s in day.active_slots)
        lines.append(f"{label} : {ranges}")
    return lines
