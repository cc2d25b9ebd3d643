"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

WHY Separate Schemas from SQLAlchemy Models?
============================================
1. Security: Password hashes and account flags never leave the server
2. Validation: Different rules for create vs update vs response
3. Decoupling: Database schema can evolve independently of API
4. Documentation: Schemas generate OpenAPI documentation
"""

from bookshelf.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from bookshelf.schemas.book import (
    BookBase,
    BookCreate,
    BookResponse,
    BookUpdate,
    ExternalBookResponse,
)
from bookshelf.schemas.common import ApiError, ErrorResponse, PageResponse
from bookshelf.schemas.user import ProfileResponse, ProfileUpdate

__all__ = [
    # Auth schemas
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    # Book schemas
    "BookBase",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "ExternalBookResponse",
    # Profile schemas
    "ProfileUpdate",
    "ProfileResponse",
    # Envelopes
    "PageResponse",
    "ApiError",
    "ErrorResponse",
]
