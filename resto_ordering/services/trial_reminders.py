"""
Daily trial reminder sweep.

For every restaurant whose effective billing source is a trial:
- days left <= 0: the trial is marked expired on the source it came from
  (the subscription row, or the legacy restaurant column), new orders are
  switched off, and the owner gets a "trial expired" email
- days left in TRIAL_REMINDER_DAYS (7, 3, 1): the owner gets a reminder

Run it once a day, from a cron calling scripts/run_trial_reminders.py or the
POST /admin/jobs/trial-reminders endpoint. Running it twice on the same day
re-sends that day's reminder but never re-expires a trial.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from sqlalchemy.orm import Session

from .. import config
from ..email_service import TRIAL_EXPIRED, TRIAL_EXPIRING, send_trial_email
from ..models import Restaurant
from .subscription_access import (
    BillingRecords,
    PrimarySubscription,
    effective_trial_end,
    is_trial_source,
    latest_subscription,
    legacy_from_restaurant,
    primary_from_row,
    select_billing_source,
    trial_days_left,
)

logger = logging.getLogger(__name__)

ACTION_EXPIRED = "expired"
ACTION_REMINDER = "reminder"


@dataclass
class ReminderOutcome:
    restaurant_id: int
    restaurant_name: str
    action: str
    days_left: int
    email_status: str

    def to_dict(self) -> dict:
        return asdict(self)


def run_trial_reminders(
    db: Session,
    now: datetime,
    send_email: Callable[..., dict] = send_trial_email,
    reminder_days: Optional[Iterable[int]] = None,
) -> List[ReminderOutcome]:
    """
    Send trial reminders and expire ended trials.

    Args:
        db: Database session (committed per expired restaurant)
        now: Current instant
        send_email: Email sender, same signature as send_trial_email
        reminder_days: Days-left values that trigger a reminder

    Returns:
        One ReminderOutcome per restaurant that was acted on.
    """
    if reminder_days is None:
        reminder_days = config.TRIAL_REMINDER_DAYS
    reminder_days = set(reminder_days)

    outcomes: List[ReminderOutcome] = []

    for restaurant in db.query(Restaurant).order_by(Restaurant.id).all():
        row = latest_subscription(db, restaurant.id)
        records = BillingRecords(
            primary=primary_from_row(row) if row is not None else None,
            legacy=legacy_from_restaurant(restaurant),
        )
        source = select_billing_source(records)
        if not is_trial_source(source):
            continue

        ends_at = effective_trial_end(source)
        if ends_at is None:
            continue

        if not restaurant.owner_email:
            logger.info("Skipping trial sweep for %s: no owner email", restaurant.slug)
            continue

        days_left = trial_days_left(ends_at, now)

        if days_left <= 0:
            if isinstance(source, PrimarySubscription):
                row.status = "expired"
            else:
                restaurant.subscription_status = "expired"
            restaurant.is_accepting_orders = False
            db.commit()

            result = send_email(TRIAL_EXPIRED, restaurant.owner_email, restaurant.name)
            logger.info("Trial expired for %s, ordering disabled", restaurant.slug)
            outcomes.append(ReminderOutcome(
                restaurant.id, restaurant.name, ACTION_EXPIRED, days_left, result.get("status", "error"),
            ))
            continue

        if days_left in reminder_days:
            result = send_email(TRIAL_EXPIRING, restaurant.owner_email, restaurant.name, days_left=days_left)
            logger.info("J-%d trial reminder for %s", days_left, restaurant.slug)
            outcomes.append(ReminderOutcome(
                restaurant.id, restaurant.name, ACTION_REMINDER, days_left, result.get("status", "error"),
            ))

    return outcomes
