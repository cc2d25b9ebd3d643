"""
Security Service

Handles password hashing and JWT token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib)
2. HS256-signed access tokens carrying subject, issuer, authorities,
   issued-at, not-before, expiry and a random token id
3. Verification that rejects bad signatures, foreign issuers and
   expired tokens

Usage:
    from bookshelf.services.security import create_access_token, decode_token

    token = create_access_token("alice")
    claims = decode_token(token)
    extract_subject(claims)  # 'alice'
"""

import logging
import uuid
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from bookshelf.config import get_settings
from bookshelf.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# CryptContext handles password hashing with bcrypt
# - deprecated: "auto" means old hashes are automatically upgraded
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("SecurePass123")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Uses constant-time comparison to prevent timing attacks.

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# JWT Token Configuration
# -------------------------------------------------------------------------
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 30


def create_access_token(
    subject: str,
    authorities: Iterable[str] = (),
) -> str:
    """
    Create a signed JWT access token.

    Claims:
        sub          the identity subject (username)
        iss          the configured issuer tag
        authorities  comma-joined authority names (empty today)
        iat / nbf    issue time
        exp          issue time + 30 minutes
        jti          random unique token id

    Args:
        subject: Username the token asserts
        authorities: Authority names to embed

    Returns:
        Encoded JWT token string

    Example:
        >>> token = create_access_token("alice")
        >>> token.count(".") == 2  # JWT format: header.payload.signature
        True
    """
    issued_at = datetime.now(UTC)
    expire = issued_at + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": subject,
        "iss": settings.jwt_issuer,
        "authorities": ",".join(authorities),
        "iat": issued_at,
        "exp": expire,
        "jti": str(uuid.uuid4()),
        "nbf": issued_at,
    }

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=ALGORITHM,
    )


def decode_token(token: str) -> dict:
    """
    Verify a JWT token and return its claims.

    The signature is re-derived with the server secret, and the issuer,
    expiry and not-before claims are checked.

    Args:
        token: The JWT token string

    Returns:
        Decoded claims

    Raises:
        InvalidTokenError: On any signature, issuer or time-window failure.
            The original JWTError is chained as __cause__.
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
            issuer=settings.jwt_issuer,
        )
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise InvalidTokenError(f"Invalid token: {e}") from e


def extract_subject(claims: dict) -> str:
    """Return the subject of already-verified claims."""
    return claims["sub"]
