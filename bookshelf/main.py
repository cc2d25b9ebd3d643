"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() function returns configured app
   - Tests build the app once and override get_db

2. Lifespan Events
   - startup: create missing tables when AUTO_CREATE_TABLES is set
   - shutdown: dispose of the connection pool

3. Middleware Stack
   - CORS: Allow cross-origin requests
   - TokenAuthenticationMiddleware: bearer token -> request.state.identity
   - SlowAPI: rate limiting

4. Exception Handlers
   - Every failure is answered with {"errors": [{code, message}], "timestamp"}
   - Domain errors carry their own status and code
   - Unexpected errors are logged with a traceback and reported generically
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError

from bookshelf.config import get_settings
from bookshelf.database import create_tables, engine
from bookshelf.exceptions import (
    NULL_REFERENCE_ERROR_CODE,
    UNEXPECTED_ERROR_CODE,
    VALIDATION_ERROR_CODE,
    BookshelfError,
)
from bookshelf.middleware import TokenAuthenticationMiddleware
from bookshelf.routers import auth_router, books_router, users_router
from bookshelf.schemas.common import ApiError, ErrorResponse
from bookshelf.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def error_response(status_code: int, errors: list[ApiError]) -> JSONResponse:
    body = ErrorResponse(errors=errors, timestamp=datetime.now(UTC))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def validation_messages(exc: RequestValidationError) -> list[str]:
    """
    One readable message per failed field.

    Messages raised by our own validators are passed through as written;
    pydantic's built-in messages are prefixed with the field name.
    """
    messages = []
    for error in exc.errors():
        ctx_error = error.get("ctx", {}).get("error")
        if error.get("type") == "value_error" and ctx_error is not None:
            messages.append(str(ctx_error))
            continue
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{field}: {error.get('msg')}" if field else error.get("msg", ""))
    return messages


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Environment: {settings.environment}, debug: {settings.debug}")
    logger.info(f"API version: {settings.api_version}")

    if settings.auto_create_tables:
        create_tables()
        logger.info("Database tables verified")

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")
    engine.dispose()


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Bookshelf API

A catalog of books and the personal collections of registered users.

### Features
- **Books**: CRUD, filtering, and ISBN lookup backed by OpenLibrary
- **Users**: Profiles and the books each one owns

### Authentication
Register at `/api/v1/auth/register`, log in at `/api/v1/auth/login` and
send the returned token as `Authorization: Bearer <token>`.

### Rate Limiting
Per-IP limits; login and registration are stricter.
        """,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # Authentication Gate
    # -------------------------------------------------------------------------
    # Never rejects; routers decide whether an identity is required.
    app.add_middleware(TokenAuthenticationMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(BookshelfError)
    async def bookshelf_exception_handler(
        request: Request,
        exc: BookshelfError,
    ) -> JSONResponse:
        """Domain errors: status and code come from the exception class."""
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return error_response(exc.status_code, [ApiError(code=exc.code, message=exc.message)])

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = [
            ApiError(code=VALIDATION_ERROR_CODE, message=message)
            for message in validation_messages(exc)
        ]
        return error_response(status.HTTP_400_BAD_REQUEST, errors)

    @app.exception_handler(AttributeError)
    async def null_reference_exception_handler(
        request: Request,
        exc: AttributeError,
    ) -> JSONResponse:
        logger.error(f"Null reference: {exc}", exc_info=exc)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            [ApiError(
                code=NULL_REFERENCE_ERROR_CODE,
                message="An internal error occurred: Null reference.",
            )],
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error while hiding details from users.
        """
        logger.error(f"Database error: {exc}", exc_info=exc)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            [ApiError(code=UNEXPECTED_ERROR_CODE, message="An unexpected error occurred.")],
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all exception handler."""
        logger.error(f"Unhandled error: {exc}", exc_info=exc)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            [ApiError(code=UNEXPECTED_ERROR_CODE, message="An unexpected error occurred.")],
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    api_prefix = f"/api/{settings.api_version}"

    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(books_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and healthy.",
    )
    async def health_check() -> dict:
        """
        Health check endpoint.

        Used by load balancers and container liveness probes.
        """
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.api_version,
            "environment": settings.environment,
            "rate_limiting": {
                "enabled": settings.rate_limit_enabled,
                "default_limit": settings.rate_limit_default,
                "auth_limit": settings.rate_limit_auth,
            },
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Welcome message and API information.",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn bookshelf.main:app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookshelf.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
