"""
Book Model

Represents a book in the catalog.

This file also contains the association table for the profile <-> book
many-to-many relationship:
- profile_books: Links profiles to the books they own

WHY no Book.owners collection?
==============================
The owning side of the relationship is Profile.books. Books do not keep an
in-memory list of their owners; the owners of a book are read with a join
query over profile_books (see services/collection.py), so there is only one
place where the association is ever mutated.
"""

import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.database import Base


# =============================================================================
# Association Table
# =============================================================================
# The composite primary key guarantees a profile references a given book at
# most once, even if two requests race to add the same book.

profile_books = Table(
    "profile_books",
    Base.metadata,
    Column(
        "profile_id",
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "book_id",
        Uuid,
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    comment="Association table linking profiles to the books they own",
)


class Book(Base):
    """
    Book model representing a catalog entry.

    Table: books

    Fields are free-form strings as they arrive from clients or from
    OpenLibrary; only pages is numeric.

    Example:
        book = Book(
            title="Dune",
            author="Frank Herbert",
            genre="Science Fiction",
            year="1965",
            pages=412,
            isbn="9780441013593",
        )
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # -------------------------------------------------------------------------
    # Descriptive Fields
    # -------------------------------------------------------------------------
    title: Mapped[str | None] = mapped_column(
        String(500),
        index=True,
        nullable=True,
        comment="Book title"
    )

    subtitle: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="Book subtitle"
    )

    author: Mapped[str | None] = mapped_column(
        String(255),
        index=True,
        nullable=True,
        comment="Author name"
    )

    genre: Mapped[str | None] = mapped_column(
        String(100),
        index=True,
        nullable=True,
        comment="Genre label"
    )

    publisher: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Publisher name"
    )

    # Kept as text: OpenLibrary publish dates look like "June 1965"
    year: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        comment="Publication year or date as text"
    )

    pages: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Number of pages"
    )

    isbn: Mapped[str | None] = mapped_column(
        String(20),
        index=True,
        nullable=True,
        comment="International Standard Book Number"
    )

    image: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Cover image URL or path"
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', isbn='{self.isbn}')"
