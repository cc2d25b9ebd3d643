"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Provided here:
- DbSession: one SQLAlchemy session per request
- Pagination: page / per_page query parameters
- BookFilters: title / author / genre query parameters
- CurrentIdentity: the identity installed by TokenAuthenticationMiddleware,
  required on protected routers
"""

from typing import Annotated

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from bookshelf.database import get_db
from bookshelf.exceptions import AuthenticationRequiredError
from bookshelf.middleware import IdentityContext

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def list_books(db: Session = Depends(get_db)):
#
# You can write:
#   def list_books(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed)
    - per_page: How many items per page
    - skip: Calculated offset for the database query
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        per_page: int = Query(
            default=10,
            ge=1,
            le=100,
            description="Number of items per page (max 100)",
            examples=[10, 25, 50],
        ),
    ) -> None:
        self.page = page
        self.per_page = per_page

    @property
    def skip(self) -> int:
        """
        Number of records to skip.

        Page 1 -> 0, page 2 -> per_page, page 3 -> 2 * per_page
        """
        return (self.page - 1) * self.per_page


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Book Filters
# =============================================================================
class BookFilterParams:
    """
    Optional filters for the book list.

    Usage:
        GET /api/v1/books/?title=dune&genre=science%20fiction
    """

    def __init__(
        self,
        title: str | None = Query(
            default=None,
            min_length=1,
            max_length=100,
            description="Filter by title (partial match, case-insensitive)",
            examples=["dune"],
        ),
        author: str | None = Query(
            default=None,
            min_length=1,
            max_length=100,
            description="Filter by author (partial match, case-insensitive)",
            examples=["herbert"],
        ),
        genre: str | None = Query(
            default=None,
            min_length=1,
            max_length=100,
            description="Filter by genre (exact match, case-insensitive)",
            examples=["Science Fiction"],
        ),
    ) -> None:
        self.title = title
        self.author = author
        self.genre = genre


BookFilters = Annotated[BookFilterParams, Depends()]


# =============================================================================
# Identity
# =============================================================================
# TokenAuthenticationMiddleware stores the identity on request.state. These
# dependencies only read it; they never decode tokens themselves.

def get_identity(request: Request) -> IdentityContext | None:
    """Identity of the current request, or None when anonymous."""
    return getattr(request.state, "identity", None)


def require_identity(
    identity: IdentityContext | None = Depends(get_identity),
) -> IdentityContext:
    """
    Identity of the current request.

    Raises:
        AuthenticationRequiredError: The request carries no valid token (401)
    """
    if identity is None:
        raise AuthenticationRequiredError()
    return identity


CurrentIdentity = Annotated[IdentityContext, Depends(require_identity)]
