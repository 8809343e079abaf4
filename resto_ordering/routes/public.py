"""
Public Routes for Resto Ordering
================================

Storefront endpoints that don't require authentication. The ordering
frontend calls these to show the open/closed badge, the pickup-time
picker, and the opening hours.

Endpoints:
----------
- GET /restaurants/{slug}/availability: Open state and order eligibility
- GET /restaurants/{slug}/pickup-slots: Grouped pickup times for today/tomorrow
- POST /restaurants/{slug}/pickup-slots/validate: Check a chosen pickup time
- GET /restaurants/{slug}/schedule: Weekly hours and display lines

Rate Limiting:
--------------
All endpoints are throttled per client IP with slowapi
(RATE_LIMIT_PUBLIC, default "60 per minute").

Time:
-----
"Now" comes from the get_clock dependency and is converted to the
restaurant's own timezone before any schedule is evaluated.

Usage:
------
    GET /restaurants/chez-marcel/availability
    {
        "is_open": false,
        "next_open_label": "Today at 17:30",
        "availability_mode": "auto",
        "can_order": true,
        ...
    }
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from ..config import RATE_LIMIT_ENABLED, get_rate_limit_public
from ..db import get_db
from ..models import Restaurant
from ..schemas.schedule import (
    AvailabilityOut,
    PickupSlotsOut,
    PickupValidateRequest,
    PickupValidateResponse,
    ScheduleOut,
    SlotGroupOut,
    TimeRangeSchema,
)
from ..services.availability import can_place_order, normalize_mode, resolve_availability
from ..services.helpers import (
    get_restaurant_by_slug,
    load_schedule,
    restaurant_now,
    restaurant_tz,
    serialize_day,
)
from ..services.hours_importer import format_schedule_lines
from ..services.schedule import normalize_week
from ..services.time_slots import build_slot_groups, is_offered_slot
from ..services.time_utils import Clock, get_clock

logger = logging.getLogger(__name__)

PICKUP_NOT_OFFERED_REASON = "This pickup time is not available."

limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)

# Router definition
public_restaurants_router = APIRouter(prefix="/restaurants", tags=["Storefront"])


def _get_restaurant_or_404(db: Session, slug: str) -> Restaurant:
    restaurant = get_restaurant_by_slug(db, slug)
    if not restaurant:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


# =============================================================================
# Storefront Endpoints
# =============================================================================

@public_restaurants_router.get("/{slug}/availability", response_model=AvailabilityOut)
@limiter.limit(get_rate_limit_public)
def get_availability(
    request: Request,
    slug: str,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AvailabilityOut:
    """
    Open/closed state for the storefront badge.

    is_open is display only. can_order comes from the accepting-orders
    switch and is the only thing that gates starting a new order.
    """
    restaurant = _get_restaurant_or_404(db, slug)
    now = restaurant_now(restaurant, clock)

    state = resolve_availability(
        restaurant.availability_mode,
        restaurant.is_open,
        load_schedule(restaurant),
        now,
    )
    eligibility = can_place_order(restaurant.is_accepting_orders)

    return AvailabilityOut(
        is_open=state.is_open,
        next_open_label=state.next_open_label,
        current_close_time=state.current_close_time,
        today_slots=[TimeRangeSchema(open=s.open, close=s.close) for s in state.today_slots],
        availability_mode=normalize_mode(restaurant.availability_mode),
        can_order=eligibility.can_order,
        reason=eligibility.reason,
    )


@public_restaurants_router.get("/{slug}/pickup-slots", response_model=PickupSlotsOut)
@limiter.limit(get_rate_limit_public)
def get_pickup_slots(
    request: Request,
    slug: str,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> PickupSlotsOut:
    """Pickup times for today and tomorrow, grouped by service period."""
    restaurant = _get_restaurant_or_404(db, slug)
    now = restaurant_now(restaurant, clock)

    groups = build_slot_groups(load_schedule(restaurant), now)
    return PickupSlotsOut(
        timezone=str(restaurant_tz(restaurant)),
        groups=[
            SlotGroupOut(label=g.label, period=g.period, day_offset=g.day_offset, slots=g.slots)
            for g in groups
        ],
    )


@public_restaurants_router.post("/{slug}/pickup-slots/validate", response_model=PickupValidateResponse)
@limiter.limit(get_rate_limit_public)
def validate_pickup_slot(
    request: Request,
    slug: str,
    payload: PickupValidateRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> PickupValidateResponse:
    """
    Check a customer's pickup time against what is offered right now.

    A time without an offset is read in the restaurant's timezone.
    """
    restaurant = _get_restaurant_or_404(db, slug)
    tz = restaurant_tz(restaurant)
    requested = payload.pickup_time
    if requested.tzinfo is None:
        requested = requested.replace(tzinfo=tz)
    else:
        requested = requested.astimezone(tz)

    eligibility = can_place_order(restaurant.is_accepting_orders)
    if not eligibility.can_order:
        return PickupValidateResponse(valid=False, pickup_time=requested, reason=eligibility.reason)

    groups = build_slot_groups(load_schedule(restaurant), restaurant_now(restaurant, clock))
    if not is_offered_slot(groups, requested):
        logger.info("Rejected pickup time %s for %s", requested.isoformat(), slug)
        return PickupValidateResponse(valid=False, pickup_time=requested, reason=PICKUP_NOT_OFFERED_REASON)

    return PickupValidateResponse(valid=True, pickup_time=requested)


@public_restaurants_router.get("/{slug}/schedule", response_model=ScheduleOut)
@limiter.limit(get_rate_limit_public)
def get_schedule(
    request: Request,
    slug: str,
    db: Session = Depends(get_db),
) -> ScheduleOut:
    """Weekly hours, all seven days, with Monday-first display lines."""
    restaurant = _get_restaurant_or_404(db, slug)
    week = normalize_week(load_schedule(restaurant))
    return ScheduleOut(
        days=[serialize_day(d) for d in week],
        display_lines=format_schedule_lines(week),
    )
