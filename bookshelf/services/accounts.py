"""
Account Service

Coordinates login and registration.

Login:
    authenticate -> issue token -> wrap in LoginResponse

Registration:
    1. Reject a taken username, then a taken email
    2. Hash the password
    3. Generate one identity key
    4. Write the credential and the profile in ONE transaction

If anything fails between the two writes the transaction is rolled back,
so a credential never exists without its profile.
"""

import logging
import uuid

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bookshelf.exceptions import EmailTakenError, UsernameTakenError
from bookshelf.models import Credential, Profile
from bookshelf.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from bookshelf.services.credentials import authenticate
from bookshelf.services.security import create_access_token, hash_password

logger = logging.getLogger(__name__)


def username_exists(db: Session, username: str) -> bool:
    return db.execute(select(exists().where(Credential.username == username))).scalar()


def email_exists(db: Session, email: str) -> bool:
    return db.execute(select(exists().where(Credential.email == email))).scalar()


def login(db: Session, request: LoginRequest) -> LoginResponse:
    """
    Authenticate and issue an access token.

    Failures from authenticate() propagate unchanged.
    """
    identity = authenticate(db, request.username, request.password)
    token = create_access_token(identity.username, identity.authorities)

    logger.info(f"User logged in: {identity.username}")

    return LoginResponse(
        username=request.username,
        message="User logged in correctly",
        token=token,
        status=True,
    )


def register(db: Session, request: RegisterRequest) -> RegisterResponse:
    """
    Create the credential and profile of a new account.

    Args:
        db: Database session
        request: Validated registration data

    Returns:
        RegisterResponse echoing username and email

    Raises:
        UsernameTakenError: The username is already registered
        EmailTakenError: The email is already registered
        SQLAlchemyError: The write failed; nothing was persisted
    """
    if username_exists(db, request.username):
        raise UsernameTakenError()

    if email_exists(db, request.email):
        raise EmailTakenError()

    password_hash = hash_password(request.password)
    account_id = uuid.uuid4()

    credential = Credential(
        id=account_id,
        username=request.username,
        password_hash=password_hash,
        email=request.email,
        is_enabled=True,
        account_not_expired=True,
        account_not_locked=True,
        credentials_not_expired=True,
    )
    profile = Profile(
        id=account_id,
        username=request.username,
        name=request.name,
        birth_date=request.birth_date,
        books=[],
    )

    try:
        db.add(credential)
        # Flush the credential first so the profile's foreign key resolves
        db.flush()
        db.add(profile)
        db.commit()
    except IntegrityError:
        db.rollback()
        # Another request took the username or email after the checks above
        if username_exists(db, request.username):
            raise UsernameTakenError()
        if email_exists(db, request.email):
            raise EmailTakenError()
        logger.exception(f"Registration failed for {request.username}; rolled back")
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Registration failed for {request.username}; rolled back")
        raise

    logger.info(f"New user registered: {request.username}")

    return RegisterResponse(
        username=credential.username,
        email=credential.email,
        message="User successfully registered",
        status=True,
    )
