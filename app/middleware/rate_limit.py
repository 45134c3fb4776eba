"""
Rate limiting middleware for the DUPulse API.

Only endpoints decorated with @limiter.limit are throttled; today that is
the login endpoint, guarded against password guessing.
"""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from core.config import get_settings

logger = logging.getLogger(__name__)

# Initialize limiter
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",  # Use in-memory storage (for Redis, use redis://host:port)
    strategy="fixed-window"
)


def login_rate_limit() -> str:
    """Per-IP limit for sign-in attempts, read from settings."""
    return get_settings().LOGIN_RATE_LIMIT


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    429 response in the API's {"message": ...} error shape, with the
    X-RateLimit headers slowapi would normally add.
    """
    logger.warning(f"Rate limit exceeded for {get_remote_address(request)} on {request.url.path}")
    response = JSONResponse(
        status_code=429,
        content={"message": f"Too many requests. Rate limit exceeded: {exc.detail}"}
    )
    view_rate_limit = getattr(request.state, "view_rate_limit", None)
    if view_rate_limit is not None:
        response = request.app.state.limiter._inject_headers(response, view_rate_limit)
    return response


def setup_rate_limiting(app):
    """
    Setup rate limiting for FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    logger.info("Rate limiting configured")
