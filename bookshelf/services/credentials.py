"""
Credential Verification

Checks a presented username/password pair against the stored bcrypt hash.

The returned identity never carries authorities: roles are not modelled,
so every verified identity has an empty authority set.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookshelf.exceptions import BadCredentialsError, UnknownUserError
from bookshelf.models import Credential
from bookshelf.services.security import verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifiedIdentity:
    """Result of a successful credential check."""

    username: str
    password_hash: str
    authorities: tuple[str, ...] = ()


def get_credential_by_username(db: Session, username: str) -> Credential | None:
    stmt = select(Credential).where(Credential.username == username)
    return db.execute(stmt).scalar_one_or_none()


def authenticate(db: Session, username: str, password: str) -> VerifiedIdentity:
    """
    Verify a username/password pair.

    Args:
        db: Database session
        username: Login name
        password: Plain text password

    Returns:
        VerifiedIdentity for the account

    Raises:
        UnknownUserError: No credential has this username
        BadCredentialsError: The password does not match the stored hash
    """
    credential = get_credential_by_username(db, username)
    if credential is None:
        logger.warning(f"Login failed: unknown user {username}")
        raise UnknownUserError(username)

    if not verify_password(password, credential.password_hash):
        logger.warning(f"Login failed: incorrect password for {username}")
        raise BadCredentialsError()

    return VerifiedIdentity(
        username=credential.username,
        password_hash=credential.password_hash,
    )
