"""
FastAPI middleware for Resto Ordering.
"""

import logging
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .logging_config import reset_request_id, set_request_id

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Adds a unique request ID to each request for log correlation.

    An incoming X-Request-ID header is reused; otherwise a UUID is generated.
    The ID is stored in request.state.request_id, bound to the logging
    context for the duration of the request, and echoed in the
    X-Request-ID response header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = set_request_id(request_id)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            logger.debug("%s %s -> %s", request.method, request.url.path, response.status_code)
            return response
        finally:
            reset_request_id(token)
