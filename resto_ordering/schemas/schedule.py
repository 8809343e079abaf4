"""
Schedule, Availability and Pickup Slot Schemas
==============================================

Pydantic models for the weekly schedule, the storefront availability
verdict, the grouped pickup-time picker, and the hours importer.

Day-of-week values are 0=Sunday..6=Saturday everywhere. Values outside 0-6
are rejected with 422 rather than defaulted.

Endpoint Coverage:
------------------
- GET /restaurants/{slug}/schedule
- GET /restaurants/{slug}/availability
- GET /restaurants/{slug}/pickup-slots
- POST /restaurants/{slug}/pickup-slots/validate
- PUT /admin/restaurants/{slug}/schedule
- POST /admin/restaurants/{slug}/schedule/copy-day
- POST /admin/restaurants/{slug}/hours/import
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class TimeRangeSchema(BaseModel):
    """One open interval. close <= open means it closes after midnight."""
    open: str = Field(examples=["11:00"])
    close: str = Field(examples=["14:30"])


class DayScheduleSchema(BaseModel):
    day_of_week: int = Field(ge=0, le=6)
    is_open: bool = False
    slots: List[TimeRangeSchema] = []


class ScheduleReplace(BaseModel):
    """
    Full replacement of the weekly schedule: all seven days, once each.

    Example:
        {"days": [{"day_of_week": 1, "is_open": true,
                   "slots": [{"open": "11:00", "close": "14:30"},
                             {"open": "17:30", "close": "22:30"}]}, ...]}
    """
    days: List[DayScheduleSchema]


class ScheduleOut(BaseModel):
    days: List[DayScheduleSchema]
    display_lines: List[str]


class CopyDayRequest(BaseModel):
    """Copy one day's hours to every day (Monday by default)."""
    source_day: int = Field(default=1, ge=0, le=6)


class HoursImportRequest(BaseModel):
    """
    Place-listing weekday text to import.

    Example:
        {"weekday_text": ["Monday: 11:00 AM – 2:30 PM, 5:30 – 10:30 PM",
                          "Sunday: Closed"],
         "persist": true}
    """
    weekday_text: List[str]
    persist: bool = True


class HoursImportResponse(BaseModel):
    days: List[DayScheduleSchema]
    display_lines: List[str]
    persisted: bool


class AvailabilityOut(BaseModel):
    """
    Storefront verdict.

    is_open drives the open/closed display; can_order alone decides whether
    a new order may be started.
    """
    is_open: bool
    next_open_label: Optional[str] = None
    current_close_time: Optional[str] = None
    today_slots: List[TimeRangeSchema] = []
    availability_mode: str
    can_order: bool
    reason: Optional[str] = None


class SlotGroupOut(BaseModel):
    label: str
    period: str
    day_offset: int
    slots: List[datetime]


class PickupSlotsOut(BaseModel):
    timezone: str
    groups: List[SlotGroupOut]


class PickupValidateRequest(BaseModel):
    """A pickup time chosen by the customer. Naive values are read in restaurant time."""
    pickup_time: datetime


class PickupValidateResponse(BaseModel):
    valid: bool
    pickup_time: datetime
    reason: Optional[str] = None
