"""
Admin Job Routes for Resto Ordering
===================================

Endpoints that trigger scheduled maintenance jobs by hand or from an
external cron.

Endpoints:
----------
- POST /admin/jobs/trial-reminders: Run the daily trial reminder sweep

Authentication:
---------------
All endpoints require admin authentication via HTTP Basic Auth.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import verify_admin_credentials
from ..db import get_db
from ..schemas.subscriptions import TrialReminderOutcomeOut, TrialSweepOut
from ..services.time_utils import Clock, get_clock
from ..services.trial_reminders import run_trial_reminders

logger = logging.getLogger(__name__)

# Router definition
admin_jobs_router = APIRouter(prefix="/admin/jobs", tags=["Admin - Jobs"])


@admin_jobs_router.post("/trial-reminders", response_model=TrialSweepOut)
def trigger_trial_reminders(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _admin: str = Depends(verify_admin_credentials),
) -> TrialSweepOut:
    """Send J-7/J-3/J-1 reminders and expire ended trials."""
    outcomes = run_trial_reminders(db, clock())
    logger.info("Trial sweep finished: %d restaurants acted on", len(outcomes))
    return TrialSweepOut(
        processed=len(outcomes),
        outcomes=[TrialReminderOutcomeOut(**o.to_dict()) for o in outcomes],
    )
