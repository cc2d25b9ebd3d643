"""
Book Pydantic Schemas

- BookCreate / BookUpdate: catalog writes
- BookResponse: catalog entry as returned by the API
- ExternalBookResponse: ISBN lookup result (local catalog or OpenLibrary)
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field


class BookBase(BaseModel):
    """
    Shared book fields.

    Every field is optional; the catalog accepts partial records, the way
    OpenLibrary imports arrive.
    """

    title: str | None = Field(
        default=None,
        max_length=500,
        description="Book title",
        examples=["Dune"],
    )

    subtitle: str | None = Field(
        default=None,
        max_length=500,
        description="Book subtitle",
    )

    author: str | None = Field(
        default=None,
        max_length=255,
        description="Author name",
        examples=["Frank Herbert"],
    )

    genre: str | None = Field(
        default=None,
        max_length=100,
        description="Genre label",
        examples=["Science Fiction"],
    )

    publisher: str | None = Field(
        default=None,
        max_length=255,
        description="Publisher name",
        examples=["Chilton Books"],
    )

    year: str | None = Field(
        default=None,
        max_length=50,
        description="Publication year",
        examples=["1965"],
    )

    pages: int | None = Field(
        default=None,
        gt=0,
        le=50000,
        description="Number of pages",
        examples=[412],
    )

    isbn: str | None = Field(
        default=None,
        max_length=20,
        description="ISBN-10 or ISBN-13",
        examples=["9780441013593"],
    )

    image: str | None = Field(
        default=None,
        max_length=2000,
        description="Cover image URL or path",
    )


class BookCreate(BookBase):
    """Schema for creating a new book."""


class BookUpdate(BookBase):
    """
    Schema for updating an existing book.

    Only non-blank strings (and a non-null page count) replace stored values.
    """


class BookResponse(BookBase):
    """Schema for book responses."""

    id: uuid.UUID = Field(..., description="Unique book identifier")

    model_config = ConfigDict(from_attributes=True)


class ExternalBookResponse(BaseModel):
    """
    ISBN lookup result.

    Shaped after the OpenLibrary "data" format so local and remote hits
    look the same to clients.
    """

    isbn: str
    title: str | None = None
    subtitle: str | None = None
    publishers: list[str] = Field(default_factory=list)
    publish_date: str | None = None
    number_of_pages: int | None = None
    authors: list[str] = Field(default_factory=list)
