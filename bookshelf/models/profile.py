"""
Profile Model

User-facing attributes of an account and the books it owns.

SQLAlchemy 2.0 Features Used:
- mapped_column(): Columns with full type support
- Mapped[]: Type hint wrapper for SQLAlchemy columns
- relationship(secondary=...): Many-to-many through profile_books
"""

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.database import Base
from bookshelf.models.book import profile_books

if TYPE_CHECKING:
    from bookshelf.models.book import Book


class Profile(Base):
    """
    Profile of a registered account.

    Table: profiles

    The id is the identity key shared with the Credential row. It is a
    foreign key only so the database orders inserts and deletes correctly;
    callers never set it directly.

    username is copied from the credential at registration time and may be
    edited afterwards, so it is not guaranteed to match the login name.

    Relationships:
    - books: Many-to-Many with Book (this side owns the association)
    """

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("credentials.id", ondelete="CASCADE"),
        primary_key=True,
    )

    username: Mapped[str] = mapped_column(
        String(50),
        index=True,
        nullable=False,
        comment="Display username"
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Display name"
    )

    birth_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Date of birth"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    # selectin loading mirrors the eager fetch of the collection: every
    # profile view lists its book ids.
    books: Mapped[list["Book"]] = relationship(
        "Book",
        secondary=profile_books,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"Profile(id={self.id}, username='{self.username}')"
