"""
Availability Resolver and Order-Acceptance Gate
===============================================

Two independent decisions the storefront makes before an order starts:

1. **Is the restaurant open?** resolve_availability() combines the operating
   mode with the weekly schedule and the current local time. It drives the
   "open"/"closed" badge and the "next opening" projection.

2. **May a new order be created?** can_place_order() looks at the
   is_accepting_orders master switch only. An operator can pause orders
   during a rush while the storefront still shows "open", and the switch is
   never derived from the schedule.

Availability Modes:
-------------------
- "always": open, schedule ignored
- "manual": the operator's is_open flag, schedule ignored even if present
- "auto": derived from the weekly schedule and now; falls back to the manual
  flag when the restaurant has no schedule rows at all

Both functions are pure: pass `now` in the restaurant's local time.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from .schedule import DAY_NAMES, DAYS_PER_WEEK, DaySchedule, TimeRange
from .time_utils import minutes_of, sunday_first_weekday

logger = logging.getLogger(__name__)

MODE_ALWAYS = "always"
MODE_MANUAL = "manual"
MODE_AUTO = "auto"
AVAILABILITY_MODES = (MODE_ALWAYS, MODE_MANUAL, MODE_AUTO)

NOT_ACCEPTING_ORDERS_REASON = "This restaurant is not accepting orders right now."


@dataclass
class RestaurantAvailabilityState:
    is_open: bool
    next_open_label: Optional[str] = None
    current_close_time: Optional[str] = None
    today_slots: List[TimeRange] = field(default_factory=list)


@dataclass
class OrderEligibility:
    can_order: bool
    reason: Optional[str] = None


def normalize_mode(mode: Optional[str]) -> str:
    """Unknown or missing modes behave as "manual"."""
    return mode if mode in AVAILABILITY_MODES else MODE_MANUAL


def _open_slot_today(day: Optional[DaySchedule], current: int) -> Optional[TimeRange]:
    if day is None:
        return None
    for slot in day.active_slots:
        if slot.is_overnight:
            # Today's share of an overnight interval runs to midnight
            if current >= slot.open_minutes:
                return slot
        elif slot.open_minutes <= current < slot.close_minutes:
            return slot
    return None


def _open_slot_from_yesterday(day: Optional[DaySchedule], current: int) -> Optional[TimeRange]:
    if day is None:
        return None
    for slot in day.active_slots:
        if slot.is_overnight and current < slot.close_minutes:
            return slot
    return None


def resolve_availability(
    mode: Optional[str],
    manual_flag: bool,
    schedule: Iterable[DaySchedule],
    now: datetime,
) -> RestaurantAvailabilityState:
    """
    Decide whether the restaurant is open right now.

    Args:
        mode: "always", "manual" or "auto"
        manual_flag: The operator's is_open flag
        schedule: DaySchedule entries (any subset of the week; may be empty)
        now: Current time in the restaurant's timezone

    Returns:
        RestaurantAvailabilityState. next_open_label reads "Today at 11:00"
        or "<DayName> at 11:00"; it is None when open, when the mode is not
        "auto", or when no day of the coming week opens.
    """
    mode = normalize_mode(mode)

    if mode == MODE_ALWAYS:
        return RestaurantAvailabilityState(is_open=True)
    if mode == MODE_MANUAL:
        return RestaurantAvailabilityState(is_open=bool(manual_flag))

    by_day = {d.day_of_week: d for d in schedule}
    if not by_day:
        return RestaurantAvailabilityState(is_open=bool(manual_flag))

    today_index = sunday_first_weekday(now)
    current = minutes_of(now)
    today = by_day.get(today_index)
    today_slots = today.active_slots if today is not None else []

    open_slot = _open_slot_today(today, current) or _open_slot_from_yesterday(
        by_day.get((today_index - 1) % DAYS_PER_WEEK), current
    )
    if open_slot is not None:
        return RestaurantAvailabilityState(
            is_open=True,
            current_close_time=open_slot.close,
            today_slots=today_slots,
        )

    for slot in today_slots:
        if current < slot.open_minutes:
            return RestaurantAvailabilityState(
                is_open=False,
                next_open_label=f"Today at {slot.open}",
                today_slots=today_slots,
            )

    for offset in range(1, DAYS_PER_WEEK + 1):
        check_index = (today_index + offset) % DAYS_PER_WEEK
        day = by_day.get(check_index)
        if day is not None and day.active_slots:
            return RestaurantAvailabilityState(
                is_open=False,
                next_open_label=f"{DAY_NAMES[check_index]} at {day.active_slots[0].open}",
                today_slots=today_slots,
            )

    return RestaurantAvailabilityState(is_open=False, today_slots=today_slots)


def can_place_order(accepting_orders: bool) -> OrderEligibility:
    """
    The single authoritative check for creating a new order.

    Only the is_accepting_orders switch counts; schedule and open state are
    not consulted here.
    """
    if not accepting_orders:
        return OrderEligibility(can_order=False, reason=NOT_ACCEPTING_ORDERS_REASON)
    return OrderEligibility(can_order=True)
