"""
Configuration Module for Resto Ordering
=======================================

This module centralizes all configuration settings, environment variables, and
constants used throughout the ordering platform. All environment variables and
their defaults are defined here so the rest of the code never reads os.environ
directly.

Configuration Categories:
-------------------------
- **Restaurant Defaults**: Timezone applied to restaurants created without one.

- **Pickup Slots**: Granularity of bookable pickup times, the preparation
  margin kept before closing, the minimum lead time from "now", the number
  of days offered, and the hour splitting midday from evening service.

- **Subscription Gating**: Trial banner urgency threshold, reminder days for
  the trial sweep, and the dashboard redirect targets.

- **Rate Limiting**: Throttling of the public storefront endpoints.

- **CORS Settings**: Cross-Origin Resource Sharing for the storefront and
  dashboard frontends.

- **Admin Authentication**: HTTP Basic Auth credentials for admin endpoints.

Environment Variables:
----------------------
- DEFAULT_TIMEZONE: IANA timezone for new restaurants (default: "Europe/Paris")
- SLOT_INTERVAL_MINUTES: Pickup slot granularity (default: 15)
- PRE_CLOSE_MARGIN_MINUTES: No slot within this many minutes of closing (default: 15)
- MIN_LEAD_TIME_MINUTES: No slot earlier than now + this (default: 20)
- SLOT_HORIZON_DAYS: Days of pickup slots offered, today included (default: 2)
- EVENING_BOUNDARY_HOUR: Slots at or after this hour are "evening" (default: 15)
- TRIAL_URGENT_DAYS: Banner turns urgent at or below this (default: 3)
- TRIAL_REMINDER_DAYS: Comma-separated reminder days (default: "7,3,1")
- PAYMENT_PORTAL_URL: Payment management link shown on past-due block screen
- CHOOSE_PLAN_PATH: Redirect target for pending payments (default: "/choisir-plan")
- REACTIVATE_PATH: Redirect target for ended subscriptions (default: "/abonnement")
- RATE_LIMIT_PUBLIC: Public endpoint rate limit (default: "60 per minute")
- RATE_LIMIT_ENABLED: Enable/disable rate limiting (default: "true")
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")
- ADMIN_USERNAME: Admin username (default: "admin")
- ADMIN_PASSWORD: Admin password (required for admin access)

Usage:
------
    from resto_ordering import config

    interval = config.SLOT_INTERVAL_MINUTES
"""

import os
from typing import List


def _int_list(raw: str) -> List[int]:
    return [int(part.strip()) for part in raw.split(",") if part.strip()]


# =============================================================================
# Restaurant Defaults
# =============================================================================

# Restaurants store their own IANA timezone; this one is used when none is given
DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "Europe/Paris")


# =============================================================================
# Pickup Slot Configuration
# =============================================================================
# Scheduled pickup offers fixed-granularity timestamps inside each open
# interval of today and tomorrow.

SLOT_INTERVAL_MINUTES: int = int(os.getenv("SLOT_INTERVAL_MINUTES", "15"))

# The kitchen needs this long before closing; the last slot ends before it
PRE_CLOSE_MARGIN_MINUTES: int = int(os.getenv("PRE_CLOSE_MARGIN_MINUTES", "15"))

# Customers cannot pick a slot sooner than this from now
MIN_LEAD_TIME_MINUTES: int = int(os.getenv("MIN_LEAD_TIME_MINUTES", "20"))

# Today + tomorrow
SLOT_HORIZON_DAYS: int = int(os.getenv("SLOT_HORIZON_DAYS", "2"))

# Slots before this hour are grouped as midday service, the rest as evening
EVENING_BOUNDARY_HOUR: int = int(os.getenv("EVENING_BOUNDARY_HOUR", "15"))

# Midday group is labelled "midi" only when its first slot starts before this
NOON_HOUR: int = 12


# =============================================================================
# Subscription Gating Configuration
# =============================================================================

# Trial banner switches to its urgent variant at or below this many days
TRIAL_URGENT_DAYS: int = int(os.getenv("TRIAL_URGENT_DAYS", "3"))

# The daily sweep emails the owner when exactly this many days are left
TRIAL_REMINDER_DAYS: List[int] = _int_list(os.getenv("TRIAL_REMINDER_DAYS", "7,3,1"))

PAYMENT_PORTAL_URL: str = os.getenv(
    "PAYMENT_PORTAL_URL", "https://billing.example.com/account"
)
CHOOSE_PLAN_PATH: str = os.getenv("CHOOSE_PLAN_PATH", "/choisir-plan")
REACTIVATE_PATH: str = os.getenv("REACTIVATE_PATH", "/abonnement")


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Uses slowapi with in-memory storage (use Redis for multi-worker prod).

RATE_LIMIT_PUBLIC: str = os.getenv("RATE_LIMIT_PUBLIC", "60 per minute")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


def get_rate_limit_public() -> str:
    """
    Return the current public endpoint rate limit.

    This function allows dynamic override in tests without modifying
    the module-level constant.
    """
    return RATE_LIMIT_PUBLIC


# =============================================================================
# CORS Configuration
# =============================================================================

# Format: comma-separated list of origins, e.g. "https://shop.fr,https://admin.shop.fr"
# Default "*" allows all origins (suitable for development only)
_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]


# =============================================================================
# Admin Authentication Configuration
# =============================================================================
# ADMIN_PASSWORD must be set in production for admin access to work.

ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")
