"""
Helper Functions for Resto Ordering
===================================

Shared database lookups and ORM <-> model conversions used by the route
handlers.

Key Functions:
--------------
- get_restaurant_by_slug: Restaurant lookup by public slug
- load_schedule: restaurant_hours rows -> DaySchedule list
- replace_schedule: Validate and overwrite all seven restaurant_hours rows
- restaurant_tz / restaurant_now: Local time of a restaurant from the clock
- serialize_day / serialize_decision: Model -> response schema
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from .. import config
from ..models import Restaurant, RestaurantHours
from ..schemas.schedule import DayScheduleSchema, TimeRangeSchema
from ..schemas.subscriptions import AccessDecisionOut, TrialBannerOut
from .schedule import DaySchedule, make_range, schedule_from_rows, schedule_to_rows, validate_schedule
from .subscription_access import AccessDecision
from .time_utils import Clock, local_now, resolve_timezone

logger = logging.getLogger(__name__)


def get_restaurant_by_slug(db: Session, slug: str) -> Optional[Restaurant]:
    return db.query(Restaurant).filter(Restaurant.slug == slug).first()


def load_schedule(restaurant: Restaurant) -> List[DaySchedule]:
    """Stored days only; an empty list means no schedule has been set."""
    return schedule_from_rows(restaurant.hours)


def days_from_schemas(days: Iterable[DayScheduleSchema]) -> List[DaySchedule]:
    """
    Convert request bodies to DaySchedule entries.

    Raises:
        ScheduleValidationError: on malformed "HH:MM" values.
    """
    return [
        DaySchedule(
            day_of_week=d.day_of_week,
            is_open=d.is_open,
            slots=[make_range(s.open, s.close) for s in d.slots],
        )
        for d in days
    ]


def replace_schedule(db: Session, restaurant: Restaurant, days: Iterable[DaySchedule]) -> List[DaySchedule]:
    """
    Validate a full week and overwrite the restaurant's hours with it.

    Raises:
        ScheduleValidationError: if the week breaks the schedule invariants.
    """
    week = validate_schedule(days)
    existing = {row.day_of_week: row for row in restaurant.hours}

    for values in schedule_to_rows(week):
        row = existing.get(values["day_of_week"])
        if row is None:
            restaurant.hours.append(RestaurantHours(**values))
        else:
            row.is_open = values["is_open"]
            row.slots = values["slots"]

    db.commit()
    db.refresh(restaurant)
    logger.info("Replaced weekly schedule for %s", restaurant.slug)
    return week


def restaurant_tz(restaurant: Restaurant) -> ZoneInfo:
    return resolve_timezone(restaurant.timezone, config.DEFAULT_TIMEZONE)


def restaurant_now(restaurant: Restaurant, clock: Clock) -> datetime:
    """The clock's current instant in the restaurant's timezone."""
    return local_now(clock, restaurant_tz(restaurant))


def serialize_day(day: DaySchedule) -> DayScheduleSchema:
    return DayScheduleSchema(
        day_of_week=day.day_of_week,
        is_open=day.is_open,
        slots=[TimeRangeSchema(open=s.open, close=s.close) for s in day.slots],
    )


def serialize_decision(decision: AccessDecision) -> AccessDecisionOut:
    banner = None
    if decision.banner is not None:
        banner = TrialBannerOut(
            days_left=decision.banner.days_left,
            urgent=decision.banner.urgent,
            ends_at=decision.banner.ends_at,
        )
    return AccessDecisionOut(
        state=decision.state.value,
        granted=decision.granted,
        banner=banner,
        redirect_to=decision.redirect_to,
        payment_url=decision.payment_url,
        source=decision.source,
    )
