"""
OpenLibrary Lookup Service

Finds a book by ISBN, first in the local catalog and then in the
OpenLibrary books API. External hits are saved to the catalog so the next
lookup is local.

Flow:
1. Query books by isbn -> found: return it
2. GET {open_library_url}?bibkeys=ISBN:<isbn>&format=json&jscmd=data
3. Map the first entry of the response, store it as a new Book

Any network, HTTP status or decoding failure is logged and treated as
"not found"; the lookup never raises for a misbehaving upstream.
"""

import logging

import httpx
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshelf.config import get_settings
from bookshelf.models import Book
from bookshelf.schemas.book import ExternalBookResponse

logger = logging.getLogger(__name__)
settings = get_settings()


def _names(entries) -> list[str]:
    # OpenLibrary returns [{"name": ..., "url": ...}, ...]
    if not isinstance(entries, list):
        return []
    return [entry["name"] for entry in entries if isinstance(entry, dict) and entry.get("name")]


def map_open_library_data(isbn: str, payload: dict) -> ExternalBookResponse | None:
    """
    Map an OpenLibrary "jscmd=data" response to an ExternalBookResponse.

    The response is keyed by bibkey ("ISBN:<isbn>"); only the first entry
    is used. An empty object means OpenLibrary has no such book.
    """
    if not payload:
        return None

    data = next(iter(payload.values()))
    if not isinstance(data, dict):
        return None

    pages = data.get("number_of_pages")

    return ExternalBookResponse(
        isbn=isbn,
        title=data.get("title"),
        subtitle=data.get("subtitle"),
        publishers=_names(data.get("publishers")),
        publish_date=data.get("publish_date"),
        number_of_pages=pages if isinstance(pages, int) else None,
        authors=_names(data.get("authors")),
    )


def fetch_book_info(
    isbn: str,
    transport: httpx.BaseTransport | None = None,
) -> ExternalBookResponse | None:
    """
    Query OpenLibrary for an ISBN.

    Args:
        isbn: ISBN-10 or ISBN-13
        transport: Optional httpx transport (tests pass a MockTransport)

    Returns:
        The mapped book, or None if OpenLibrary has nothing or fails
    """
    params = {
        "bibkeys": f"ISBN:{isbn}",
        "format": "json",
        "jscmd": "data",
    }

    try:
        with httpx.Client(timeout=settings.open_library_timeout, transport=transport) as client:
            response = client.get(settings.open_library_url, params=params)
            response.raise_for_status()
            payload = response.json()
    except httpx.HTTPError as e:
        logger.error(f"OpenLibrary request failed for ISBN {isbn}: {e}")
        return None
    except ValueError as e:
        logger.error(f"OpenLibrary returned invalid JSON for ISBN {isbn}: {e}")
        return None

    if not isinstance(payload, dict):
        logger.error(f"Unexpected OpenLibrary payload for ISBN {isbn}")
        return None

    return map_open_library_data(isbn, payload)


def book_to_external(book: Book) -> ExternalBookResponse:
    return ExternalBookResponse(
        isbn=book.isbn,
        title=book.title,
        subtitle=book.subtitle,
        publishers=[book.publisher] if book.publisher else [],
        publish_date=book.year,
        number_of_pages=book.pages,
        authors=[book.author] if book.author else [],
    )


def find_book_by_isbn(db: Session, isbn: str) -> ExternalBookResponse | None:
    """Look an ISBN up in the local catalog only."""
    stmt = select(Book).where(Book.isbn == isbn).order_by(Book.id).limit(1)
    book = db.execute(stmt).scalars().first()
    return book_to_external(book) if book is not None else None


def find_book_by_isbn_with_external_search(
    db: Session,
    isbn: str,
    transport: httpx.BaseTransport | None = None,
) -> tuple[ExternalBookResponse | None, bool]:
    """
    Look an ISBN up locally, falling back to OpenLibrary.

    Returns:
        (book, created) where created is True when the book came from
        OpenLibrary and was just added to the catalog. book is None when
        neither source knows the ISBN.
    """
    local = find_book_by_isbn(db, isbn)
    if local is not None:
        return local, False

    external = fetch_book_info(isbn, transport=transport)
    if external is None:
        logger.info(f"ISBN {isbn} not found locally or on OpenLibrary")
        return None, False

    book = Book(
        isbn=external.isbn,
        title=external.title,
        subtitle=external.subtitle,
        publisher=external.publishers[0] if external.publishers else None,
        year=external.publish_date,
        pages=external.number_of_pages,
        author=external.authors[0] if external.authors else None,
    )
    db.add(book)
    db.commit()

    logger.info(f"Imported ISBN {isbn} from OpenLibrary as book {book.id}")

    return external, True
