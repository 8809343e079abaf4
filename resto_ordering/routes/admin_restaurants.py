"""
Admin Restaurant Routes for Resto Ordering
==========================================

Operator endpoints for a restaurant's availability settings, weekly hours,
and subscription state.

Endpoints:
----------
- POST /admin/restaurants: Create a restaurant
- GET /admin/restaurants/{slug}: Restaurant details
- PUT /admin/restaurants/{slug}/availability: Mode and manual open flag
- PUT /admin/restaurants/{slug}/accepting-orders: Pause or resume new orders
- PUT /admin/restaurants/{slug}/schedule: Replace the weekly hours
- POST /admin/restaurants/{slug}/schedule/copy-day: Copy one day to the week
- POST /admin/restaurants/{slug}/hours/import: Import place-listing hours
- GET /admin/restaurants/{slug}/access: Dashboard access decision
- POST /admin/restaurants/{slug}/subscriptions: Record a subscription row

Authentication:
---------------
All endpoints require admin authentication via HTTP Basic Auth.

Schedule Writes:
----------------
Every write replaces all seven days at once after validation. Overlapping
or unordered slots, bad "HH:MM" values, and duplicate or missing days are
rejected with 400 and nothing is stored.

Usage:
------
    # Import hours copied from a place listing, without saving them
    POST /admin/restaurants/chez-marcel/hours/import
    {
        "weekday_text": ["Monday: 11:00 AM – 2:30 PM, 5:30 – 10:30 PM"],
        "persist": false
    }
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import config
from ..auth import verify_admin_credentials
from ..db import get_db
from ..models import Restaurant, Subscription
from ..schemas.restaurants import (
    AcceptingOrdersUpdate,
    AvailabilityUpdate,
    RestaurantCreate,
    RestaurantOut,
)
from ..schemas.schedule import (
    CopyDayRequest,
    HoursImportRequest,
    HoursImportResponse,
    ScheduleOut,
    ScheduleReplace,
)
from ..schemas.subscriptions import AccessDecisionOut, SubscriptionCreate, SubscriptionOut
from ..services.helpers import (
    days_from_schemas,
    get_restaurant_by_slug,
    load_schedule,
    replace_schedule,
    serialize_day,
    serialize_decision,
)
from ..services.hours_importer import format_schedule_lines, parse_weekly_hours
from ..services.schedule import ScheduleValidationError, copy_day_to_all, default_schedule
from ..services.subscription_access import evaluate_access
from ..services.time_utils import Clock, get_clock

logger = logging.getLogger(__name__)

# Router definition
admin_restaurants_router = APIRouter(prefix="/admin/restaurants", tags=["Admin - Restaurants"])


def _get_restaurant_or_404(db: Session, slug: str) -> Restaurant:
    restaurant = get_restaurant_by_slug(db, slug)
    if not restaurant:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


def _schedule_out(days) -> ScheduleOut:
    return ScheduleOut(
        days=[serialize_day(d) for d in days],
        display_lines=format_schedule_lines(days),
    )


# =============================================================================
# Restaurant Endpoints
# =============================================================================

@admin_restaurants_router.post("", response_model=RestaurantOut, status_code=201)
def create_restaurant(
    payload: RestaurantCreate,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> RestaurantOut:
    """Create a restaurant, with the default weekly hours unless told otherwise."""
    if get_restaurant_by_slug(db, payload.slug):
        raise HTTPException(status_code=409, detail="Slug already in use")

    restaurant = Restaurant(
        slug=payload.slug,
        name=payload.name,
        timezone=payload.timezone or config.DEFAULT_TIMEZONE,
        owner_email=payload.owner_email,
        availability_mode=payload.availability_mode,
        is_open=payload.is_open,
        is_accepting_orders=payload.is_accepting_orders,
        subscription_status=payload.subscription_status,
        trial_end_date=payload.trial_end_date,
        bonus_weeks=payload.bonus_weeks,
    )
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)

    if payload.with_default_schedule:
        replace_schedule(db, restaurant, default_schedule())

    logger.info("Created restaurant: %s (id=%s)", restaurant.slug, restaurant.id)
    return RestaurantOut.model_validate(restaurant)


@admin_restaurants_router.get("/{slug}", response_model=RestaurantOut)
def get_restaurant(
    slug: str,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> RestaurantOut:
    return RestaurantOut.model_validate(_get_restaurant_or_404(db, slug))


@admin_restaurants_router.put("/{slug}/availability", response_model=RestaurantOut)
def update_availability(
    slug: str,
    payload: AvailabilityUpdate,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> RestaurantOut:
    """Change the availability mode and/or the manual open flag."""
    restaurant = _get_restaurant_or_404(db, slug)

    if payload.availability_mode is not None:
        restaurant.availability_mode = payload.availability_mode
    if payload.is_open is not None:
        restaurant.is_open = payload.is_open

    db.commit()
    db.refresh(restaurant)
    logger.info(
        "Availability for %s: mode=%s is_open=%s",
        slug, restaurant.availability_mode, restaurant.is_open,
    )
    return RestaurantOut.model_validate(restaurant)


@admin_restaurants_router.put("/{slug}/accepting-orders", response_model=RestaurantOut)
def update_accepting_orders(
    slug: str,
    payload: AcceptingOrdersUpdate,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> RestaurantOut:
    """Pause or resume new orders. Open/closed display is unaffected."""
    restaurant = _get_restaurant_or_404(db, slug)
    restaurant.is_accepting_orders = payload.is_accepting_orders
    db.commit()
    db.refresh(restaurant)
    logger.info("Accepting orders for %s: %s", slug, restaurant.is_accepting_orders)
    return RestaurantOut.model_validate(restaurant)


# =============================================================================
# Schedule Endpoints
# =============================================================================

@admin_restaurants_router.put("/{slug}/schedule", response_model=ScheduleOut)
def put_schedule(
    slug: str,
    payload: ScheduleReplace,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> ScheduleOut:
    """Replace all seven days of the weekly schedule."""
    restaurant = _get_restaurant_or_404(db, slug)
    try:
        week = replace_schedule(db, restaurant, days_from_schemas(payload.days))
    except ScheduleValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _schedule_out(week)


@admin_restaurants_router.post("/{slug}/schedule/copy-day", response_model=ScheduleOut)
def copy_schedule_day(
    slug: str,
    payload: CopyDayRequest,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> ScheduleOut:
    """Apply one day's hours (Monday by default) to every day of the week."""
    restaurant = _get_restaurant_or_404(db, slug)
    week = copy_day_to_all(load_schedule(restaurant), payload.source_day)
    try:
        week = replace_schedule(db, restaurant, week)
    except ScheduleValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _schedule_out(week)


@admin_restaurants_router.post("/{slug}/hours/import", response_model=HoursImportResponse)
def import_hours(
    slug: str,
    payload: HoursImportRequest,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> HoursImportResponse:
    """
    Parse place-listing weekday text into a weekly schedule.

    Unparseable lines and intervals are skipped; days that never appear
    come back closed. With persist=true the result replaces the stored
    schedule.
    """
    restaurant = _get_restaurant_or_404(db, slug)
    week = parse_weekly_hours(payload.weekday_text)

    if payload.persist:
        try:
            week = replace_schedule(db, restaurant, week)
        except ScheduleValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

    logger.info(
        "Imported %d hours lines for %s (persisted=%s)",
        len(payload.weekday_text), slug, payload.persist,
    )
    return HoursImportResponse(
        days=[serialize_day(d) for d in week],
        display_lines=format_schedule_lines(week),
        persisted=payload.persist,
    )


# =============================================================================
# Subscription Endpoints
# =============================================================================

@admin_restaurants_router.get("/{slug}/access", response_model=AccessDecisionOut)
def get_access(
    slug: str,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _admin: str = Depends(verify_admin_credentials),
) -> AccessDecisionOut:
    """What the operator dashboard should do before rendering."""
    restaurant = _get_restaurant_or_404(db, slug)
    return serialize_decision(evaluate_access(db, restaurant.id, clock()))


@admin_restaurants_router.post("/{slug}/subscriptions", response_model=SubscriptionOut, status_code=201)
def create_subscription(
    slug: str,
    payload: SubscriptionCreate,
    db: Session = Depends(get_db),
    _admin: str = Depends(verify_admin_credentials),
) -> SubscriptionOut:
    """Record a new subscription row; the most recent row is authoritative."""
    restaurant = _get_restaurant_or_404(db, slug)
    subscription = Subscription(
        restaurant_id=restaurant.id,
        status=payload.status,
        trial_end=payload.trial_end,
        bonus_days=payload.bonus_days,
    )
    db.add(subscription)
    db.commit()
    db.refresh(subscription)
    logger.info("Recorded %s subscription for %s", subscription.status, slug)
    return SubscriptionOut.model_validate(subscription)
