"""
Clock and "HH:MM" time helpers.

Schedule values travel as zero-padded 24-hour "HH:MM" strings (that is how
they are stored and shown), but every comparison goes through integer
minutes since midnight.
"""

import re
from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

MINUTES_PER_DAY = 24 * 60

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current instant in UTC."""
    return datetime.now(timezone.utc)


def get_clock() -> Clock:
    """FastAPI dependency returning the clock; tests override it to pin "now"."""
    return system_clock


def to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight. Raises ValueError if malformed."""
    match = _HHMM_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return hours * 60 + minutes


def from_minutes(total: int) -> str:
    """Convert minutes since midnight back to zero-padded "HH:MM"."""
    total %= MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def minutes_of(moment: datetime) -> int:
    """Minutes since midnight of a datetime's wall-clock time."""
    return moment.hour * 60 + moment.minute


def crosses_midnight(open_minutes: int, close_minutes: int) -> bool:
    """A close at or before the open means the interval ends the next day."""
    return close_minutes <= open_minutes


def sunday_first_weekday(moment: datetime) -> int:
    """Day of week with 0=Sunday..6=Saturday (Python's weekday() is Monday-first)."""
    return (moment.weekday() + 1) % 7


def resolve_timezone(name: str | None, default: str) -> ZoneInfo:
    """Load an IANA timezone, falling back to the default for unknown names."""
    try:
        return ZoneInfo(name or default)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(default)


def local_now(clock: Clock, tz: ZoneInfo) -> datetime:
    """Read the clock and express the instant in the restaurant's timezone."""
    now = clock()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz)
