"""
Credential Model

Stores the login secret and account-state flags of an account.

Every credential has exactly one Profile sharing the same primary key;
both rows are created in a single transaction by services/accounts.py.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.database import Base


class Credential(Base):
    """
    Authentication record for one account.

    Table: credentials

    Indexes:
    - Primary key on id (shared with profiles.id)
    - username: Unique index for login lookups
    - email: Unique index for registration checks

    The password is only ever stored as a bcrypt hash.
    """

    __tablename__ = "credentials"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # -------------------------------------------------------------------------
    # Authentication Fields
    # -------------------------------------------------------------------------
    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
        comment="Login name, immutable after creation"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Account email address"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the account was registered"
    )

    # -------------------------------------------------------------------------
    # Account State
    # -------------------------------------------------------------------------
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    account_not_expired: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    account_not_locked: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    credentials_not_expired: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        """Developer-friendly string representation."""
        return f"Credential(id={self.id}, username='{self.username}', email='{self.email}')"
