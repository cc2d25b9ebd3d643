"""
Book Collection Service

Manages the profile <-> book association.

Invariants:
===========
1. A profile owns a given book at most once. The check happens here and the
   profile_books primary key enforces it again at the database level.
2. The association is only changed through add_book, remove_book and
   replace_book_set. Profile.books is the single owning side; the owners of
   a book are read with a join query, never from a mirrored list.
3. Each operation commits once, so a concurrent request touching the same
   profile sees either the old or the new collection.
"""

import logging
import uuid

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshelf.exceptions import (
    AlreadyOwnedError,
    BookNotFoundError,
    NotOwnedError,
    ProfileNotFoundError,
)
from bookshelf.models import Book, Profile, profile_books
from bookshelf.schemas.user import ProfileResponse

logger = logging.getLogger(__name__)


def get_profile_or_raise(db: Session, profile_id: uuid.UUID) -> Profile:
    profile = db.get(Profile, profile_id)
    if profile is None:
        raise ProfileNotFoundError(profile_id)
    return profile


def book_exists(db: Session, book_id: uuid.UUID) -> bool:
    return db.execute(select(exists().where(Book.id == book_id))).scalar()


def add_book(db: Session, profile_id: uuid.UUID, book_id: uuid.UUID) -> ProfileResponse:
    """
    Add a catalog book to a profile's collection.

    Raises:
        ProfileNotFoundError: No profile with profile_id
        BookNotFoundError: No book with book_id
        AlreadyOwnedError: The profile already owns the book
    """
    profile = get_profile_or_raise(db, profile_id)

    book = db.get(Book, book_id)
    if book is None:
        raise BookNotFoundError(book_id)

    if any(owned.id == book_id for owned in profile.books):
        raise AlreadyOwnedError(profile_id, book_id)

    profile.books.append(book)
    try:
        db.commit()
    except IntegrityError as e:
        # Another request added the same book first
        db.rollback()
        raise AlreadyOwnedError(profile_id, book_id) from e

    db.refresh(profile)
    logger.info(f"Book {book_id} added to collection of {profile_id}")

    return ProfileResponse.from_profile(profile)


def remove_book(db: Session, profile_id: uuid.UUID, book_id: uuid.UUID) -> ProfileResponse:
    """
    Remove a book from a profile's collection.

    A book id unknown to the catalog is a BookNotFoundError; a catalog book
    the profile does not own is a NotOwnedError.

    Raises:
        ProfileNotFoundError: No profile with profile_id
        BookNotFoundError: No book with book_id in the catalog
        NotOwnedError: The profile does not own the book
    """
    profile = get_profile_or_raise(db, profile_id)

    if not book_exists(db, book_id):
        raise BookNotFoundError(book_id)

    if not profile.books:
        raise NotOwnedError(profile_id, book_id)

    remaining = [owned for owned in profile.books if owned.id != book_id]
    if len(remaining) == len(profile.books):
        raise NotOwnedError(profile_id, book_id)

    profile.books = remaining
    db.commit()
    db.refresh(profile)

    logger.info(f"Book {book_id} removed from collection of {profile_id}")

    return ProfileResponse.from_profile(profile)


def replace_book_set(
    db: Session,
    profile: Profile,
    book_ids: list[uuid.UUID] | None,
) -> None:
    """
    Replace a profile's whole collection.

    Does not commit; the caller's update commits everything together.

    Quirks kept on purpose:
    - None or an empty list leaves the collection unchanged.
    - Ids that do not resolve in the catalog are skipped without error.
    """
    if not book_ids:
        return

    profile.books.clear()

    added: set[uuid.UUID] = set()
    for book_id in book_ids:
        if book_id in added:
            continue
        book = db.get(Book, book_id)
        if book is None:
            logger.debug(f"Skipping unknown book {book_id} for profile {profile.id}")
            continue
        profile.books.append(book)
        added.add(book_id)


def list_book_owners(db: Session, book_id: uuid.UUID) -> list[ProfileResponse]:
    """
    List the profiles that own a book.

    Raises:
        BookNotFoundError: No book with book_id
    """
    if not book_exists(db, book_id):
        raise BookNotFoundError(book_id)

    stmt = (
        select(Profile)
        .join(profile_books, profile_books.c.profile_id == Profile.id)
        .where(profile_books.c.book_id == book_id)
        .order_by(Profile.username)
    )
    owners = db.execute(stmt).scalars().all()

    return [ProfileResponse.from_profile(owner) for owner in owners]
