"""
Domain Exceptions

Typed failures raised by the services at the point of detection. They
propagate unmodified up to the HTTP boundary, where main.py maps each kind to
a fixed status code and a structured error body:

    {
        "errors": [{"code": "0200", "message": "Book with ID not found: ..."}],
        "timestamp": "2025-08-05T10:30:00"
    }

Error codes:
- 0100: Validation failed (request body or parameters)
- 0200: Resource not found
- 0300: Conflict (duplicate ownership, username or email)
- 0400: Authentication failed
- 0500: Too many requests
- 9000: Internal error caused by a null reference
- 9999: Any other unexpected error
"""

from uuid import UUID

from fastapi import status

VALIDATION_ERROR_CODE = "0100"
NULL_REFERENCE_ERROR_CODE = "9000"
UNEXPECTED_ERROR_CODE = "9999"
RATE_LIMIT_ERROR_CODE = "0500"


class BookshelfError(Exception):
    """
    Base class for every error the API reports with a stable code.

    Subclasses override code, status_code and default_message.
    """

    code: str = UNEXPECTED_ERROR_CODE
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# =============================================================================
# Not Found
# =============================================================================
class NotFoundError(BookshelfError):
    code = "0200"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ProfileNotFoundError(NotFoundError):
    def __init__(self, profile_id: UUID | None = None) -> None:
        message = f"User with ID not found: {profile_id}" if profile_id is not None else None
        super().__init__(message)


class BookNotFoundError(NotFoundError):
    def __init__(self, book_id: UUID | None = None) -> None:
        message = f"Book with ID not found: {book_id}" if book_id is not None else None
        super().__init__(message)


class NotOwnedError(NotFoundError):
    """The book exists in the catalog but is not in the profile's collection."""

    def __init__(self, profile_id: UUID, book_id: UUID) -> None:
        super().__init__(
            f"The book with ID {book_id} does not exist in the collection "
            f"of the user with ID {profile_id}"
        )


# =============================================================================
# Conflict
# =============================================================================
class ConflictError(BookshelfError):
    code = "0300"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class AlreadyOwnedError(ConflictError):
    def __init__(self, profile_id: UUID, book_id: UUID) -> None:
        super().__init__(
            f"The book with ID {book_id} already exist in the collection "
            f"of the user with ID {profile_id}"
        )


class UsernameTakenError(ConflictError):
    default_message = "The username is already in use"


class EmailTakenError(ConflictError):
    default_message = "Email is already in use"


# =============================================================================
# Authentication
# =============================================================================
class AuthenticationError(BookshelfError):
    code = "0400"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed"


class UnknownUserError(AuthenticationError):
    def __init__(self, username: str) -> None:
        super().__init__(f"The user {username} doesn't exist")


class BadCredentialsError(AuthenticationError):
    default_message = "Invalid password"


class InvalidTokenError(AuthenticationError):
    default_message = "Invalid or expired token"


class AuthenticationRequiredError(AuthenticationError):
    default_message = "Full authentication is required to access this resource"
