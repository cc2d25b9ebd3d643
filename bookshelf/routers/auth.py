"""
Authentication Router

Public endpoints that hand out identities:
- POST /auth/register: create credential + profile
- POST /auth/login: username/password -> signed access token

Both carry the stricter RATE_LIMIT_AUTH limit to slow down credential
stuffing and spam registrations.
"""

from fastapi import APIRouter, Request, status

from bookshelf.config import get_settings
from bookshelf.dependencies import DbSession
from bookshelf.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from bookshelf.services import accounts
from bookshelf.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"description": "Validation failed"},
        401: {"description": "Unknown user or wrong password"},
        409: {"description": "Username or email already in use"},
    },
)


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log in",
    description="Exchange a username and password for a bearer token.",
)
@limiter.limit(settings.rate_limit_auth)
def login(
    request: Request,
    credentials: LoginRequest,
    db: DbSession,
) -> LoginResponse:
    """
    Authenticate and return a signed access token.

    Send the token back as `Authorization: Bearer <token>`.
    """
    return accounts.login(db, credentials)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create an account: a credential for logging in and a profile that
    holds the user's book collection.

    **Rules:**
    - Username and email must be unused
    - Password is stored as a bcrypt hash
    - Birth date, if given, must not be in the future
    """,
)
@limiter.limit(settings.rate_limit_auth)
def register(
    request: Request,
    registration: RegisterRequest,
    db: DbSession,
) -> RegisterResponse:
    return accounts.register(db, registration)
