"""
Books Router

Catalog endpoints. Every route requires a bearer token.

Endpoints:
- GET    /books/                - Paginated list with title/author/genre filters
- GET    /books/isbn/{isbn}     - Lookup by ISBN, importing from OpenLibrary
- GET    /books/{book_id}       - Single book
- GET    /books/{book_id}/owners - Profiles that own the book
- POST   /books/                - Create
- PUT    /books/{book_id}       - Partial update
- DELETE /books/{book_id}       - Delete (also drops it from every collection)
"""

import uuid

from fastapi import APIRouter, Depends, Request, Response, status

from bookshelf.config import get_settings
from bookshelf.dependencies import BookFilters, DbSession, Pagination, require_identity
from bookshelf.exceptions import NotFoundError
from bookshelf.schemas.book import (
    BookCreate,
    BookResponse,
    BookUpdate,
    ExternalBookResponse,
)
from bookshelf.schemas.common import PageResponse
from bookshelf.schemas.user import ProfileResponse
from bookshelf.services import catalog, collection, open_library
from bookshelf.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    dependencies=[Depends(require_identity)],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Book not found"},
    },
)


@router.get(
    "/",
    response_model=PageResponse[BookResponse],
    summary="List books",
    description="Get a paginated list of books with optional filtering.",
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    filters: BookFilters,
) -> PageResponse[BookResponse]:
    """
    List books ordered by title.

    - title: partial match, case-insensitive
    - author: partial match, case-insensitive
    - genre: exact match, case-insensitive
    """
    return catalog.list_books(
        db,
        page=pagination.page,
        per_page=pagination.per_page,
        title=filters.title,
        author=filters.author,
        genre=filters.genre,
    )


@router.get(
    "/isbn/{isbn}",
    response_model=ExternalBookResponse,
    summary="Find a book by ISBN",
    description="Look up the local catalog, then OpenLibrary. "
                "Books found on OpenLibrary are added to the catalog (201).",
    responses={
        200: {"description": "Found in the local catalog"},
        201: {"description": "Imported from OpenLibrary"},
    },
)
@limiter.limit(settings.rate_limit_default)
def find_by_isbn(
    request: Request,
    isbn: str,
    response: Response,
    db: DbSession,
) -> ExternalBookResponse:
    book, created = open_library.find_book_by_isbn_with_external_search(db, isbn)
    if book is None:
        raise NotFoundError(f"No book found with ISBN: {isbn}")

    if created:
        response.status_code = status.HTTP_201_CREATED

    return book


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: uuid.UUID,
    db: DbSession,
) -> BookResponse:
    return catalog.get_book(db, book_id)


@router.get(
    "/{book_id}/owners",
    response_model=list[ProfileResponse],
    summary="List the owners of a book",
    description="Profiles whose collection contains the book, ordered by username.",
)
@limiter.limit(settings.rate_limit_default)
def list_owners(
    request: Request,
    book_id: uuid.UUID,
    db: DbSession,
) -> list[ProfileResponse]:
    return collection.list_book_owners(db, book_id)


@router.post(
    "/",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a book",
)
@limiter.limit(settings.rate_limit_default)
def create_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
) -> BookResponse:
    return catalog.create_book(db, book_data)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="Only non-blank fields (and a non-null page count) replace stored values.",
)
@limiter.limit(settings.rate_limit_default)
def update_book(
    request: Request,
    book_id: uuid.UUID,
    book_data: BookUpdate,
    db: DbSession,
) -> BookResponse:
    return catalog.update_book(db, book_id, book_data)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a book",
)
@limiter.limit(settings.rate_limit_default)
def delete_book(
    request: Request,
    book_id: uuid.UUID,
    db: DbSession,
) -> None:
    catalog.delete_book(db, book_id)
