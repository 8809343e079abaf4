"""
Restaurant Schemas
==================

Pydantic models for restaurant records and the operator switches that feed
the availability engine.

Endpoint Coverage:
------------------
- POST /admin/restaurants: Create a restaurant
- GET /admin/restaurants/{slug}: Restaurant details
- PUT /admin/restaurants/{slug}/availability: Change mode / manual open flag
- PUT /admin/restaurants/{slug}/accepting-orders: Pause or resume orders

Availability Mode:
------------------
- "always": always shown as open
- "manual": is_open flag set by the operator
- "auto": derived from the weekly schedule

is_accepting_orders is separate from all of the above: it alone decides
whether a new order may be created.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

AvailabilityModeLiteral = Literal["always", "manual", "auto"]


class RestaurantOut(BaseModel):
    """
    Response model for restaurant data.

    Attributes:
        slug: Public identifier used in storefront URLs
        name: Display name
        timezone: IANA timezone used for all schedule evaluation
        availability_mode: always / manual / auto
        is_open: Manual open flag
        is_accepting_orders: Order master switch
        subscription_status: Legacy billing status
        trial_end_date: Legacy trial end
        bonus_weeks: Legacy bonus weeks added to the trial
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
    timezone: str
    owner_email: Optional[str] = None
    availability_mode: str
    is_open: bool
    is_accepting_orders: bool
    subscription_status: Optional[str] = None
    trial_end_date: Optional[datetime] = None
    bonus_weeks: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RestaurantCreate(BaseModel):
    """
    Request model for creating a restaurant.

    A new restaurant starts with the default weekly schedule unless
    with_default_schedule is false.

    Example:
        {
            "slug": "chez-marcel",
            "name": "Chez Marcel",
            "timezone": "Europe/Paris",
            "availability_mode": "auto",
            "subscription_status": "trial",
            "trial_end_date": "2024-07-01T00:00:00Z"
        }
    """
    slug: str = Field(min_length=1, max_length=80, pattern=r"^[a-z0-9][a-z0-9-]*$")
    name: str = Field(min_length=1)
    timezone: Optional[str] = None
    owner_email: Optional[str] = None
    availability_mode: AvailabilityModeLiteral = "manual"
    is_open: bool = True
    is_accepting_orders: bool = True
    subscription_status: Optional[str] = None
    trial_end_date: Optional[datetime] = None
    bonus_weeks: int = Field(default=0, ge=0)
    with_default_schedule: bool = True


class AvailabilityUpdate(BaseModel):
    """Change the availability mode and/or the manual open flag."""
    availability_mode: Optional[AvailabilityModeLiteral] = None
    is_open: Optional[bool] = None


class AcceptingOrdersUpdate(BaseModel):
    """Operator toggle for new orders."""
    is_accepting_orders: bool
