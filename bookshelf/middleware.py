"""
Token Authentication Middleware

Runs once per request, before routing:

1. Read the Authorization header
2. If it is "Bearer <token>", decode and verify the token
3. On success, store an IdentityContext on request.state.identity
4. Always hand the request on

The gate never rejects a request itself. A missing, malformed, expired or
forged token leaves the request anonymous (request.state.identity is None);
routes that need an identity declare the require_identity dependency, which
answers 401.
"""

import logging
from dataclasses import dataclass

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from bookshelf.exceptions import InvalidTokenError
from bookshelf.services.security import decode_token, extract_subject

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class IdentityContext:
    """Authenticated identity for the current request."""

    principal: str
    credentials: str | None = None
    authorities: tuple[str, ...] = ()


def resolve_identity(authorization: str | None) -> IdentityContext | None:
    """
    Turn an Authorization header value into an identity.

    Returns None for anything other than a valid bearer token.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None

    token = authorization[len(BEARER_PREFIX):]

    try:
        claims = decode_token(token)
    except InvalidTokenError as e:
        logger.info(f"Ignoring bearer token: {e.message}")
        return None

    subject = claims.get("sub")
    if not subject:
        logger.info("Ignoring bearer token without a subject")
        return None

    return IdentityContext(principal=extract_subject(claims))


class TokenAuthenticationMiddleware(BaseHTTPMiddleware):
    """Populate request.state.identity from the bearer token, if any."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.identity = resolve_identity(request.headers.get("Authorization"))
        return await call_next(request)
