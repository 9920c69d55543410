"""
Rate Limiting Service

Protects the credential endpoints (register, login) using slowapi.

Key Features:
=============
1. Fixed window per client: 10 requests per 15 minutes by default
2. Client identified by X-Forwarded-For / X-Real-IP, else one shared
   "unknown" bucket
3. Counter store injected through RATE_LIMIT_STORAGE_URI
   (memory:// by default, redis://... for a shared store)
4. Requests over the limit are rejected with 429; they still count

LIMITATIONS:
============
With the default memory:// store the counters live in this process only.
Several workers or hosts each keep their own window, so the effective
limit grows with the number of processes. This is best-effort throttling,
not a guarantee.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from starlette.responses import JSONResponse

from bookshelf.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

UNKNOWN_CLIENT = "unknown"


def get_client_ip(request: Request) -> str:
    """
    Get the client identifier for rate limiting.

    Checks proxy headers only; when neither is present every such request
    shares the "unknown" bucket.

    Args:
        request: FastAPI request object

    Returns:
        Client IP address string or "unknown"
    """
    # X-Forwarded-For can contain multiple IPs; first is the client
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client = forwarded_for.split(",")[0].strip()
        if client:
            return client

    # X-Real-IP header (nginx)
    real_ip = request.headers.get("X-Real-IP")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return UNKNOWN_CLIENT


def create_limiter() -> Limiter:
    """
    Create and configure the rate limiter.

    No default limits: only routes decorated with @limiter.limit are
    throttled.

    Returns:
        Configured Limiter instance
    """
    limiter = Limiter(
        key_func=get_client_ip,
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )

    logger.info(
        f"Rate limiter initialized - enabled: {settings.rate_limit_enabled}, "
        f"auth limit: {settings.rate_limit_auth}"
    )

    return limiter


# Create the limiter instance
limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Custom handler for rate limit exceeded errors.

    Returns:
        429 JSONResponse with a Retry-After header
    """
    limit_detail = str(exc.detail)

    response = JSONResponse(
        status_code=429,
        content={"detail": "Too many attempts, please try again later"},
    )

    retry_after = 15 * 60
    limit = getattr(exc, "limit", None)
    if limit is not None:
        retry_after = limit.limit.get_expiry()
    response.headers["Retry-After"] = str(retry_after)
    response.headers["X-RateLimit-Limit"] = limit_detail

    logger.warning(
        f"Rate limit exceeded for {get_client_ip(request)} on {request.url.path}: {limit_detail}"
    )

    return response
