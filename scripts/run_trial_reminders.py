#!/usr/bin/env python
"""
Daily trial reminder sweep.

Sends J-7/J-3/J-1 "trial ending" emails and expires trials that have ended
(ordering is switched off for those restaurants). Meant to run once a day
from cron.

Usage:
    # Run for the current instant
    DATABASE_URL="postgresql://..." python scripts/run_trial_reminders.py

    # Run as if it were a given instant (UTC if no offset)
    python scripts/run_trial_reminders.py --now 2024-06-10T08:00:00
"""
import argparse
import os
import sys
from datetime import datetime, timezone

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from resto_ordering.db import SessionLocal
from resto_ordering.logging_config import setup_logging
from resto_ordering.services.trial_reminders import run_trial_reminders


def parse_now(value):
    """Parse --now; naive values are read as UTC."""
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def main():
    parser = argparse.ArgumentParser(
        description="Send trial reminder emails and expire ended trials."
    )
    parser.add_argument(
        "--now",
        type=parse_now,
        default=None,
        help="ISO timestamp to run the sweep at (default: current time)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="DEBUG, INFO, WARNING, ERROR (default: LOG_LEVEL or INFO)",
    )
    args = parser.parse_args()

    setup_logging(args.log_level)
    now = args.now or datetime.now(timezone.utc)

    db = SessionLocal()
    try:
        outcomes = run_trial_reminders(db, now)
    finally:
        db.close()

    for outcome in outcomes:
        print(
            f"{outcome.restaurant_name} (id={outcome.restaurant_id}): "
            f"{outcome.action}, {outcome.days_left} days left, email {outcome.email_status}"
        )
    print(f"Processed {len(outcomes)} restaurants.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
