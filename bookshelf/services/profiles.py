"""
Profile Service

Read, update and delete user profiles.

Profiles are only created by registration (services/accounts.py). Deleting a
profile deletes the whole account: collection entries, profile and
credential go in one transaction.
"""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookshelf.exceptions import ProfileNotFoundError
from bookshelf.models import Credential, Profile
from bookshelf.schemas.common import PageResponse
from bookshelf.schemas.user import ProfileResponse, ProfileUpdate
from bookshelf.services.collection import get_profile_or_raise, replace_book_set
from bookshelf.services.credentials import get_credential_by_username

logger = logging.getLogger(__name__)


def list_profiles(
    db: Session,
    page: int = 1,
    per_page: int = 10,
) -> PageResponse[ProfileResponse]:
    total = db.execute(select(func.count()).select_from(Profile)).scalar() or 0

    stmt = (
        select(Profile)
        .order_by(Profile.username, Profile.id)
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    profiles = db.execute(stmt).scalars().all()

    return PageResponse[ProfileResponse].build(
        [ProfileResponse.from_profile(profile) for profile in profiles],
        total=total,
        page=page,
        per_page=per_page,
    )


def get_profile(db: Session, profile_id: uuid.UUID) -> ProfileResponse:
    return ProfileResponse.from_profile(get_profile_or_raise(db, profile_id))


def get_current_profile(db: Session, principal: str) -> ProfileResponse:
    """
    Resolve the profile of an authenticated principal.

    The token subject is the login name, which lives on the credential.
    The profile is found through the shared id because its own username
    may have been edited since registration.

    Raises:
        ProfileNotFoundError: The account no longer exists
    """
    credential = get_credential_by_username(db, principal)
    if credential is None:
        raise ProfileNotFoundError()

    return get_profile(db, credential.id)


def update_profile(
    db: Session,
    profile_id: uuid.UUID,
    profile_data: ProfileUpdate,
) -> ProfileResponse:
    """
    Apply a partial update to a profile.

    - username / name: replaced only by non-blank strings
    - birth_date: replaced only when given
    - book_ids: see replace_book_set()

    Raises:
        ProfileNotFoundError: No profile with profile_id
    """
    profile = get_profile_or_raise(db, profile_id)

    if profile_data.username is not None and profile_data.username.strip():
        profile.username = profile_data.username

    if profile_data.name is not None and profile_data.name.strip():
        profile.name = profile_data.name

    if profile_data.birth_date is not None:
        profile.birth_date = profile_data.birth_date

    replace_book_set(db, profile, profile_data.book_ids)

    db.commit()
    db.refresh(profile)

    logger.info(f"Profile updated: {profile_id}")

    return ProfileResponse.from_profile(profile)


def delete_profile(db: Session, profile_id: uuid.UUID) -> None:
    """
    Delete a profile together with its credential and collection entries.

    Raises:
        ProfileNotFoundError: No profile with profile_id
    """
    profile = get_profile_or_raise(db, profile_id)
    credential = db.get(Credential, profile_id)

    # Deleting the profile also deletes its profile_books rows
    db.delete(profile)
    # The profile row references the credential, so it must go first
    db.flush()
    if credential is not None:
        db.delete(credential)
    db.commit()

    logger.info(f"Profile deleted: {profile_id}")
