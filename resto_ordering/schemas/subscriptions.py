"""
Subscription Schemas
====================

Pydantic models for subscription rows, the dashboard access decision, and
the trial reminder sweep.

Endpoint Coverage:
------------------
- POST /admin/restaurants/{slug}/subscriptions: Record a subscription row
- GET /admin/restaurants/{slug}/access: Dashboard access decision
- POST /admin/jobs/trial-reminders: Run the trial sweep
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SubscriptionStatusLiteral = Literal[
    "trial", "active", "promo", "past_due", "pending_payment", "expired", "cancelled",
]


class SubscriptionCreate(BaseModel):
    status: SubscriptionStatusLiteral
    trial_end: Optional[datetime] = None
    bonus_days: int = Field(default=0, ge=0)


class SubscriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: int
    status: str
    trial_end: Optional[datetime] = None
    bonus_days: int = 0
    created_at: Optional[datetime] = None


class TrialBannerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    days_left: int
    urgent: bool
    ends_at: datetime


class AccessDecisionOut(BaseModel):
    """
    What the dashboard does before rendering an operator route.

    state is one of: granted, granted_with_banner, blocked_past_due,
    redirect_choose_plan, redirect_reactivate, unavailable (retry).

    "loading" (AccessState.LOADING) is a client-only state: the dashboard
    holds it while this request is in flight and must neither redirect nor
    render. The server never returns it.
    """
    model_config = ConfigDict(from_attributes=True)

    state: str
    granted: bool
    banner: Optional[TrialBannerOut] = None
    redirect_to: Optional[str] = None
    payment_url: Optional[str] = None
    source: Optional[str] = None


class TrialReminderOutcomeOut(BaseModel):
    restaurant_id: int
    restaurant_name: str
    action: str
    days_left: int
    email_status: str


class TrialSweepOut(BaseModel):
    processed: int
    outcomes: List[TrialReminderOutcomeOut]
