"""
Users Router

Profile and collection endpoints. Every route requires a bearer token.

Endpoints:
- GET    /users/                          - Paginated list of profiles
- GET    /users/me                        - Profile of the authenticated user
- GET    /users/{user_id}                 - Single profile
- PUT    /users/{user_id}                 - Partial update
- DELETE /users/{user_id}                 - Delete the account
- POST   /users/{user_id}/books/{book_id} - Add a book to the collection
- DELETE /users/{user_id}/books/{book_id} - Remove a book from the collection
"""

import uuid

from fastapi import APIRouter, Depends, Request, status

from bookshelf.config import get_settings
from bookshelf.dependencies import CurrentIdentity, DbSession, Pagination, require_identity
from bookshelf.schemas.common import PageResponse
from bookshelf.schemas.user import ProfileResponse, ProfileUpdate
from bookshelf.services import collection, profiles
from bookshelf.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_identity)],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "User or book not found"},
    },
)


@router.get(
    "/",
    response_model=PageResponse[ProfileResponse],
    summary="List users",
)
@limiter.limit(settings.rate_limit_default)
def list_users(
    request: Request,
    db: DbSession,
    pagination: Pagination,
) -> PageResponse[ProfileResponse]:
    return profiles.list_profiles(db, page=pagination.page, per_page=pagination.per_page)


# Declared before /{user_id} so "me" is not parsed as an id
@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current user profile",
)
@limiter.limit(settings.rate_limit_default)
def get_me(
    request: Request,
    identity: CurrentIdentity,
    db: DbSession,
) -> ProfileResponse:
    return profiles.get_current_profile(db, identity.principal)


@router.get(
    "/{user_id}",
    response_model=ProfileResponse,
    summary="Get a user by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_user(
    request: Request,
    user_id: uuid.UUID,
    db: DbSession,
) -> ProfileResponse:
    return profiles.get_profile(db, user_id)


@router.put(
    "/{user_id}",
    response_model=ProfileResponse,
    summary="Update a user",
    description="""
    Partial update of a profile.

    - Blank or missing username/name keep the stored value
    - book_ids replaces the collection; an empty list changes nothing and
      unknown ids are skipped
    """,
)
@limiter.limit(settings.rate_limit_default)
def update_user(
    request: Request,
    user_id: uuid.UUID,
    profile_data: ProfileUpdate,
    db: DbSession,
) -> ProfileResponse:
    return profiles.update_profile(db, user_id, profile_data)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
    description="Deletes the profile, its login credential and its collection.",
)
@limiter.limit(settings.rate_limit_default)
def delete_user(
    request: Request,
    user_id: uuid.UUID,
    db: DbSession,
) -> None:
    profiles.delete_profile(db, user_id)


@router.post(
    "/{user_id}/books/{book_id}",
    response_model=ProfileResponse,
    summary="Add a book to a user's collection",
    responses={409: {"description": "Book already in the collection"}},
)
@limiter.limit(settings.rate_limit_default)
def add_book(
    request: Request,
    user_id: uuid.UUID,
    book_id: uuid.UUID,
    db: DbSession,
) -> ProfileResponse:
    return collection.add_book(db, user_id, book_id)


@router.delete(
    "/{user_id}/books/{book_id}",
    response_model=ProfileResponse,
    summary="Remove a book from a user's collection",
)
@limiter.limit(settings.rate_limit_default)
def remove_book(
    request: Request,
    user_id: uuid.UUID,
    book_id: uuid.UUID,
    db: DbSession,
) -> ProfileResponse:
    return collection.remove_book(db, user_id, book_id)
