# Load environment variables FIRST, before any module imports that need them
from dotenv import load_dotenv
load_dotenv()

import logging
from typing import Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from . import config
from .logging_config import setup_logging
from .middleware import RequestIDMiddleware
from .routes import admin_jobs_router, admin_restaurants_router, public_restaurants_router
from .routes.public import limiter

# Configure logging at module load time
setup_logging()

logger = logging.getLogger(__name__)

# Database migrations are handled by Alembic.
# Run `alembic upgrade head` to apply migrations before starting the server.

app = FastAPI(
    title="Resto Ordering API",
    description="Availability and scheduling engine for restaurant online ordering",
    version="1.0.0",
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Storefront", "description": "Public availability and pickup slot endpoints"},
        {"name": "Admin - Restaurants", "description": "Restaurant settings, hours and access"},
        {"name": "Admin - Jobs", "description": "Scheduled maintenance jobs"},
    ],
)

# Add request ID middleware (before other middleware)
app.add_middleware(RequestIDMiddleware)

# Add rate limit exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ROUTERS = (public_restaurants_router, admin_restaurants_router, admin_jobs_router)

# Versioned API
api_v1_router = APIRouter(prefix="/api/v1")
for router in ROUTERS:
    api_v1_router.include_router(router)
app.include_router(api_v1_router)

# Also mount at root for backward compatibility
for router in ROUTERS:
    app.include_router(router)


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy"}


def run(host: str = "0.0.0.0", port: Optional[int] = None, reload: bool = False) -> None:
    """
    Run the API with uvicorn.

    Args:
        host: Host to bind to
        port: Port to run on (default: PORT env var or 8000)
        reload: Enable auto-reload for development
    """
    import os
    import uvicorn

    if port is None:
        port = int(os.getenv("PORT", "8000"))

    logger.info("Starting Resto Ordering API on %s:%d", host, port)
    uvicorn.run("resto_ordering.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    run()
