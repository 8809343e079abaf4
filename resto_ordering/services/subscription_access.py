"""
Subscription/Trial Access Resolver
==================================

Decides what the operator dashboard does on every protected-route entry:
render normally, render with a trial countdown banner, show the payment
failure screen, or send the operator to a billing page.

Billing Sources:
----------------
Billing state lives in two places:

- **Primary**: the most recent `subscriptions` row of the restaurant
  (status, trial_end, bonus_days).
- **Legacy**: billing columns on the restaurant itself (subscription_status,
  trial_end_date, bonus_weeks), written before subscriptions had their own
  table.

The source is a tagged union: PrimarySubscription, LegacyBilling, or None.
When a primary row exists it wins outright and the legacy columns are not
looked at, not even to fill in missing fields.

Decision Table:
---------------
Primary:
- active, promo            -> granted
- trial, end in the future -> granted_with_banner (days left, urgent <= 3)
- trial, ended or no end   -> redirect_reactivate
- past_due                 -> blocked_past_due (payment management link)
- pending_payment          -> redirect_choose_plan
- anything else            -> redirect_reactivate
Legacy:
- active                          -> granted
- trial or unset, end in future   -> granted_with_banner
- anything else                   -> redirect_reactivate

Read Failures:
--------------
A failed read is not "no subscription": load_billing_records() raises
BillingFetchError and evaluate_access() turns it into the retryable
"unavailable" state instead of falling through to the legacy columns.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import config
from ..models import Restaurant, Subscription

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class AccessState(str, Enum):
    # Client-side only, while the decision request is pending
    LOADING = "loading"
    GRANTED = "granted"
    GRANTED_WITH_BANNER = "granted_with_banner"
    BLOCKED_PAST_DUE = "blocked_past_due"
    REDIRECT_CHOOSE_PLAN = "redirect_choose_plan"
    REDIRECT_REACTIVATE = "redirect_reactivate"
    UNAVAILABLE = "unavailable"


class BillingFetchError(Exception):
    """Billing records could not be read; retry rather than decide."""


@dataclass(frozen=True)
class PrimarySubscription:
    status: str
    trial_end: Optional[datetime] = None
    bonus_days: int = 0


@dataclass(frozen=True)
class LegacyBilling:
    status: Optional[str] = None
    trial_end: Optional[datetime] = None
    bonus_weeks: int = 0


BillingSource = Union[PrimarySubscription, LegacyBilling, None]


@dataclass
class BillingRecords:
    """Both reads, completed. Either may be missing."""

    primary: Optional[PrimarySubscription] = None
    legacy: Optional[LegacyBilling] = None


@dataclass
class TrialBanner:
    days_left: int
    urgent: bool
    ends_at: datetime


@dataclass
class AccessDecision:
    state: AccessState
    banner: Optional[TrialBanner] = None
    redirect_to: Optional[str] = None
    payment_url: Optional[str] = None
    source: Optional[str] = None

    @property
    def granted(self) -> bool:
        return self.state in (AccessState.GRANTED, AccessState.GRANTED_WITH_BANNER)


def as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (as SQLite returns them) as UTC."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def select_billing_source(records: BillingRecords) -> BillingSource:
    """Primary row if there is one, otherwise the legacy columns."""
    if records.primary is not None:
        return records.primary
    return records.legacy


def effective_trial_end(source: BillingSource) -> Optional[datetime]:
    """Trial end plus bonus time, in UTC. None when the source has no trial end."""
    if source is None or source.trial_end is None:
        return None
    if isinstance(source, PrimarySubscription):
        bonus = timedelta(days=source.bonus_days or 0)
    else:
        bonus = timedelta(days=7 * (source.bonus_weeks or 0))
    return as_utc(source.trial_end) + bonus


def trial_days_left(ends_at: datetime, now: datetime) -> int:
    """Whole days remaining, rounded up (36 hours left is 2 days)."""
    remaining = (as_utc(ends_at) - as_utc(now)).total_seconds()
    return math.ceil(remaining / SECONDS_PER_DAY)


def is_trial_source(source: BillingSource) -> bool:
    """Whether the source describes a trial (legacy: trial or unset status)."""
    if isinstance(source, PrimarySubscription):
        return source.status == "trial"
    if isinstance(source, LegacyBilling):
        return source.status in ("trial", None, "") and source.trial_end is not None
    return False


def _trial_decision(source: BillingSource, now: datetime, origin: str) -> Optional[AccessDecision]:
    ends_at = effective_trial_end(source)
    if ends_at is None or ends_at <= as_utc(now):
        return None
    days_left = trial_days_left(ends_at, now)
    return AccessDecision(
        state=AccessState.GRANTED_WITH_BANNER,
        banner=TrialBanner(
            days_left=days_left,
            urgent=days_left <= config.TRIAL_URGENT_DAYS,
            ends_at=ends_at,
        ),
        source=origin,
    )


def _reactivate(origin: Optional[str]) -> AccessDecision:
    return AccessDecision(
        state=AccessState.REDIRECT_REACTIVATE,
        redirect_to=config.REACTIVATE_PATH,
        source=origin,
    )


def resolve_access(source: BillingSource, now: datetime) -> AccessDecision:
    """
    Map a billing source to the dashboard access decision.

    Args:
        source: PrimarySubscription, LegacyBilling, or None
        now: Current instant (naive values are read as UTC)
    """
    if isinstance(source, PrimarySubscription):
        status = source.status
        if status in ("active", "promo"):
            return AccessDecision(state=AccessState.GRANTED, source="primary")
        if status == "trial":
            return _trial_decision(source, now, "primary") or _reactivate("primary")
        if status == "past_due":
            return AccessDecision(
                state=AccessState.BLOCKED_PAST_DUE,
                payment_url=config.PAYMENT_PORTAL_URL,
                source="primary",
            )
        if status == "pending_payment":
            return AccessDecision(
                state=AccessState.REDIRECT_CHOOSE_PLAN,
                redirect_to=config.CHOOSE_PLAN_PATH,
                source="primary",
            )
        return _reactivate("primary")

    if isinstance(source, LegacyBilling):
        if source.status == "active":
            return AccessDecision(state=AccessState.GRANTED, source="legacy")
        if is_trial_source(source):
            decision = _trial_decision(source, now, "legacy")
            if decision is not None:
                return decision
        return _reactivate("legacy")

    return _reactivate(None)


def primary_from_row(row: Subscription) -> PrimarySubscription:
    return PrimarySubscription(
        status=row.status,
        trial_end=as_utc(row.trial_end),
        bonus_days=row.bonus_days or 0,
    )


def legacy_from_restaurant(restaurant: Restaurant) -> LegacyBilling:
    return LegacyBilling(
        status=restaurant.subscription_status or None,
        trial_end=as_utc(restaurant.trial_end_date),
        bonus_weeks=restaurant.bonus_weeks or 0,
    )


def latest_subscription(db: Session, restaurant_id: int) -> Optional[Subscription]:
    return (
        db.query(Subscription)
        .filter(Subscription.restaurant_id == restaurant_id)
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        .first()
    )


def load_billing_records(db: Session, restaurant_id: int) -> BillingRecords:
    """
    Read the primary subscription row and the legacy restaurant columns.

    Both reads complete before this returns; nothing is decided on a partial
    result.

    Raises:
        BillingFetchError: if either read fails.
    """
    try:
        row = latest_subscription(db, restaurant_id)
        restaurant = db.get(Restaurant, restaurant_id)
    except SQLAlchemyError as exc:
        raise BillingFetchError(f"Could not load billing for restaurant {restaurant_id}") from exc

    return BillingRecords(
        primary=primary_from_row(row) if row is not None else None,
        legacy=legacy_from_restaurant(restaurant) if restaurant is not None else None,
    )


def evaluate_access(db: Session, restaurant_id: int, now: datetime) -> AccessDecision:
    """Load both billing sources and resolve the dashboard access decision."""
    try:
        records = load_billing_records(db, restaurant_id)
    except BillingFetchError:
        logger.exception("Billing read failed for restaurant %s", restaurant_id)
        return AccessDecision(state=AccessState.UNAVAILABLE)

    decision = resolve_access(select_billing_source(records), now)
    logger.info(
        "Access for restaurant %s: %s (source=%s)",
        restaurant_id, decision.state.value, decision.source,
    )
    return decision
