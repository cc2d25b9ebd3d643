"""
Book Catalog Service

CRUD over the books table. Routers stay thin and call into here.
"""

import logging
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from bookshelf.exceptions import BookNotFoundError
from bookshelf.models import Book, profile_books
from bookshelf.schemas.book import BookCreate, BookResponse, BookUpdate
from bookshelf.schemas.common import PageResponse

logger = logging.getLogger(__name__)

UPDATABLE_TEXT_FIELDS = (
    "title",
    "subtitle",
    "author",
    "genre",
    "publisher",
    "year",
    "isbn",
    "image",
)


def get_book_or_raise(db: Session, book_id: uuid.UUID) -> Book:
    book = db.get(Book, book_id)
    if book is None:
        raise BookNotFoundError(book_id)
    return book


def apply_book_filters(
    stmt,
    title: str | None = None,
    author: str | None = None,
    genre: str | None = None,
):
    """
    Narrow a book query.

    - title / author: partial match, case-insensitive
    - genre: exact match, case-insensitive
    """
    if title:
        stmt = stmt.where(func.lower(Book.title).like(f"%{title.lower()}%"))

    if author:
        stmt = stmt.where(func.lower(Book.author).like(f"%{author.lower()}%"))

    if genre:
        stmt = stmt.where(func.lower(Book.genre) == genre.lower())

    return stmt


def list_books(
    db: Session,
    page: int = 1,
    per_page: int = 10,
    title: str | None = None,
    author: str | None = None,
    genre: str | None = None,
) -> PageResponse[BookResponse]:
    base_stmt = apply_book_filters(select(Book), title=title, author=author, genre=genre)

    count_stmt = select(func.count()).select_from(base_stmt.subquery())
    total = db.execute(count_stmt).scalar() or 0

    stmt = (
        base_stmt
        .order_by(Book.title, Book.id)
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    books = db.execute(stmt).scalars().all()

    return PageResponse[BookResponse].build(
        [BookResponse.model_validate(book) for book in books],
        total=total,
        page=page,
        per_page=per_page,
    )


def get_book(db: Session, book_id: uuid.UUID) -> BookResponse:
    return BookResponse.model_validate(get_book_or_raise(db, book_id))


def create_book(db: Session, book_data: BookCreate) -> BookResponse:
    book = Book(**book_data.model_dump())

    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"Book created: {book.id} ({book.title})")

    return BookResponse.model_validate(book)


def update_book(db: Session, book_id: uuid.UUID, book_data: BookUpdate) -> BookResponse:
    """
    Update a book in place.

    Blank or missing text fields keep their stored value, as does a null
    page count.

    Raises:
        BookNotFoundError: No book with book_id
    """
    book = get_book_or_raise(db, book_id)

    for field in UPDATABLE_TEXT_FIELDS:
        value = getattr(book_data, field)
        if value is not None and value.strip():
            setattr(book, field, value)

    if book_data.pages is not None:
        book.pages = book_data.pages

    db.commit()
    db.refresh(book)

    logger.info(f"Book updated: {book.id}")

    return BookResponse.model_validate(book)


def delete_book(db: Session, book_id: uuid.UUID) -> None:
    """
    Delete a book and every collection entry pointing at it.

    Raises:
        BookNotFoundError: No book with book_id
    """
    book = get_book_or_raise(db, book_id)

    # SQLite does not enforce the ON DELETE CASCADE unless foreign keys are on
    db.execute(delete(profile_books).where(profile_books.c.book_id == book_id))
    db.delete(book)
    db.commit()

    logger.info(f"Book deleted: {book_id}")
