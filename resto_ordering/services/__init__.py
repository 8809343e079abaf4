"""
Services Package for Resto Ordering
===================================

Business logic of the availability and scheduling engine. Everything here
except trial_reminders and the loaders in subscription_access is a pure
function of its arguments; "now" is always passed in.

Available Services:
-------------------
- **time_utils**: "HH:MM" <-> minutes, the injectable clock, timezones
- **schedule**: Weekly schedule model, validation, default/copy helpers
- **time_slots**: Pickup slot generation and the 2-day grouped picker
- **availability**: Open/closed resolution and the order-acceptance gate
- **hours_importer**: Place-listing weekday text -> weekly schedule
- **subscription_access**: Dashboard access decision from billing state
- **trial_reminders**: Daily trial reminder and expiry sweep
- **helpers**: Restaurant lookup, schedule persistence, response conversion

Usage:
------
    from resto_ordering.services.availability import resolve_availability
    from resto_ordering.services import time_slots
"""

from . import time_utils
from . import schedule
from . import time_slots
from . import availability
from . import hours_importer
from . import subscription_access
from . import trial_reminders
from . import helpers

__all__ = [
    "time_utils",
    "schedule",
    "time_slots",
    "availability",
    "hours_importer",
    "subscription_access",
    "trial_reminders",
    "helpers",
]
