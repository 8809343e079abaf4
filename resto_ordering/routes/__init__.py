"""
Routes Package for Resto Ordering
=================================

API route definitions organized by audience. Each module defines a FastAPI
APIRouter with a prefix and tags for OpenAPI documentation.

**Storefront Routes (no auth, rate-limited):**
- public.py: Availability, pickup slots, and weekly hours

**Admin Routes (HTTP Basic Auth):**
- admin_restaurants.py: Restaurant settings, schedule, hours import, access
- admin_jobs.py: Trial reminder sweep trigger

Router Registration:
--------------------
All routers are registered in main.py under two prefixes:
1. /api/v1/* - Versioned API (recommended)
2. /* - Root paths for backward compatibility

Error Handling:
---------------
- 400: Invalid schedule
- 401: Invalid admin credentials
- 404: Unknown restaurant slug
- 409: Slug already in use
- 422: Request validation (e.g. day_of_week outside 0-6)
- 429: Too many requests
- 503: Admin auth not configured
"""

from .public import public_restaurants_router
from .admin_restaurants import admin_restaurants_router
from .admin_jobs import admin_jobs_router

__all__ = [
    "public_restaurants_router",
    "admin_restaurants_router",
    "admin_jobs_router",
]
