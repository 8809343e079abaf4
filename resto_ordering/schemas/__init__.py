"""
Schemas Package for Resto Ordering
==================================

Pydantic models used for API request validation and response serialization.

Schema Organization:
--------------------
- **restaurants.py**: Restaurant records, availability mode, order toggle
- **schedule.py**: Weekly schedule, availability verdict, pickup slots, import
- **subscriptions.py**: Subscription rows, access decision, trial sweep

Naming Conventions:
-------------------
- *Out: Response models - what API returns
- *Create: Request models for POST
- *Update: Request models for PUT
- *Request / *Response: Other request and response bodies
"""

from .restaurants import (
    RestaurantOut,
    RestaurantCreate,
    AvailabilityUpdate,
    AcceptingOrdersUpdate,
)

from .schedule import (
    TimeRangeSchema,
    DayScheduleSchema,
    ScheduleReplace,
    ScheduleOut,
    CopyDayRequest,
    HoursImportRequest,
    HoursImportResponse,
    AvailabilityOut,
    SlotGroupOut,
    PickupSlotsOut,
    PickupValidateRequest,
    PickupValidateResponse,
)

from .subscriptions import (
    SubscriptionCreate,
    SubscriptionOut,
    TrialBannerOut,
    AccessDecisionOut,
    TrialReminderOutcomeOut,
    TrialSweepOut,
)

__all__ = [
    "RestaurantOut",
    "RestaurantCreate",
    "AvailabilityUpdate",
    "AcceptingOrdersUpdate",
    "TimeRangeSchema",
    "DayScheduleSchema",
    "ScheduleReplace",
    "ScheduleOut",
    "CopyDayRequest",
    "HoursImportRequest",
    "HoursImportResponse",
    "AvailabilityOut",
    "SlotGroupOut",
    "PickupSlotsOut",
    "PickupValidateRequest",
    "PickupValidateResponse",
    "SubscriptionCreate",
    "SubscriptionOut",
    "TrialBannerOut",
    "AccessDecisionOut",
    "TrialReminderOutcomeOut",
    "TrialSweepOut",
]
