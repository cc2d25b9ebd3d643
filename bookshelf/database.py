"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Bookshelf API.

We use SYNCHRONOUS SQLAlchemy: every route runs in FastAPI's threadpool and
performs ordinary blocking I/O against the store.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives -> create a new session
2. Use session for all database operations in that request
3. Services commit once per logical operation, rollback on failure
4. Close session when request ends

This is implemented using FastAPI's dependency injection.
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookshelf.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# Pool sizing only applies to server databases. SQLite (used by tests and
# local development) gets a single shared connection instead.

def _engine_options() -> dict:
    if settings.is_sqlite:
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
            "echo": settings.debug,
        }
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,  # Verify connections are alive before using
        "echo": settings.debug,  # Log SQL in debug mode
    }


engine = create_engine(settings.database_url, **_engine_options())


# =============================================================================
# Session Factory
# =============================================================================
# - autocommit=False: services decide when a unit of work is committed
# - autoflush=False: writes are flushed together at commit time

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    All models inherit from this class:

        class Book(Base):
            __tablename__ = "books"
            ...
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Code before yield creates the session, the route uses it, and the
    finally block closes it even if an exception occurs.

    Usage in Routes:
        @router.get("/books/")
        def list_books(db: Session = Depends(get_db)):
            ...

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables that do not exist yet.

    Called on startup when AUTO_CREATE_TABLES is enabled.
    """
    # Models must be imported so they register with Base.metadata
    import bookshelf.models  # noqa: F401

    Base.metadata.create_all(bind=engine)

