"""
Rate Limiting Service

Throttles clients with slowapi, keyed on the client IP.

Limits:
=======
- Default (every route): RATE_LIMIT_DEFAULT, 100 requests/minute
- Login and registration: RATE_LIMIT_AUTH, 10 requests/minute

Counters live in RATE_LIMIT_STORAGE_URI: "memory://" for a single process,
a redis:// URI when several API instances must share them.
"""

import logging
from datetime import UTC, datetime

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from bookshelf.config import get_settings
from bookshelf.exceptions import RATE_LIMIT_ERROR_CODE
from bookshelf.schemas.common import ApiError, ErrorResponse

logger = logging.getLogger(__name__)
settings = get_settings()


def get_client_ip(request: Request) -> str:
    """
    Get the client IP address, honouring proxy headers.

    X-Forwarded-For wins (first entry), then X-Real-IP, then the socket
    peer address.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def create_limiter() -> Limiter:
    limiter = Limiter(
        key_func=get_client_ip,
        default_limits=[settings.rate_limit_default],
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )

    logger.info(
        f"Rate limiter initialized - enabled: {settings.rate_limit_enabled}, "
        f"default: {settings.rate_limit_default}, auth: {settings.rate_limit_auth}"
    )

    return limiter


limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Answer 429 with the standard error body and a Retry-After header.
    """
    limit_detail = str(exc.detail)

    body = ErrorResponse(
        errors=[
            ApiError(
                code=RATE_LIMIT_ERROR_CODE,
                message=f"Too many requests. Please slow down. ({limit_detail})",
            )
        ],
        timestamp=datetime.now(UTC),
    )
    response = JSONResponse(status_code=429, content=body.model_dump(mode="json"))

    # Fixed one-minute windows
    response.headers["Retry-After"] = "60"
    response.headers["X-RateLimit-Limit"] = limit_detail

    logger.warning(f"Rate limit exceeded for {get_client_ip(request)}: {limit_detail}")

    return response
