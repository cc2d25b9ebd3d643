"""
Shared response envelopes: pagination and errors.
"""

import math
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """
    Paginated list envelope.

    Page numbers are 1-indexed; previous_page and next_page are null at the
    edges.
    """

    page: list[T] = Field(..., description="Items on the current page")
    count: int = Field(..., description="Number of items on the current page")
    limit: int = Field(..., description="Maximum items per page")
    offset: int = Field(..., description="Index of the first item on this page")
    total_pages: int = Field(..., description="Total number of pages")
    total_count: int = Field(..., description="Total number of items")
    previous_page: int | None = Field(default=None, description="Previous page number")
    current_page: int = Field(..., description="Current page number")
    next_page: int | None = Field(default=None, description="Next page number")

    @classmethod
    def build(cls, items: list[T], total: int, page: int, per_page: int) -> "PageResponse[T]":
        total_pages = math.ceil(total / per_page) if total > 0 else 0
        return cls(
            page=items,
            count=len(items),
            limit=per_page,
            offset=(page - 1) * per_page,
            total_pages=total_pages,
            total_count=total,
            previous_page=page - 1 if page > 1 else None,
            current_page=page,
            next_page=page + 1 if page < total_pages else None,
        )


class ApiError(BaseModel):
    """A single error entry with a stable code clients can branch on."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""

    errors: list[ApiError]
    timestamp: datetime
