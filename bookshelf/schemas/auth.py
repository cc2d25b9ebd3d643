"""
Authentication Pydantic Schemas

Schemas:
- LoginRequest / LoginResponse: POST /auth/login
- RegisterRequest / RegisterResponse: POST /auth/register

Passwords only ever travel inbound; responses never include them.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _not_blank(value: str, message: str) -> str:
    if not value or not value.strip():
        raise ValueError(message)
    return value


class LoginRequest(BaseModel):
    """Credentials presented at login."""

    username: str = Field(..., description="Login name", examples=["alice"])
    password: str = Field(..., description="Plain text password", examples=["SecurePass123"])

    @field_validator("username")
    @classmethod
    def username_required(cls, v: str) -> str:
        return _not_blank(v, "The username is obligatory")

    @field_validator("password")
    @classmethod
    def password_required(cls, v: str) -> str:
        return _not_blank(v, "The password is obligatory")


class LoginResponse(BaseModel):
    """Envelope returned after a successful login."""

    username: str
    message: str
    status: bool
    token: str = Field(..., description="Bearer token for the Authorization header")


class RegisterRequest(BaseModel):
    """
    Data needed to open an account.

    Creates the credential (username, password, email) and the profile
    (name, birth_date) in one step.
    """

    username: str = Field(
        ...,
        max_length=50,
        description="Unique login name",
        examples=["alice"],
    )

    # bcrypt only considers the first 72 bytes
    password: str = Field(
        ...,
        max_length=72,
        description="Plain text password",
        examples=["SecurePass123"],
    )

    email: EmailStr = Field(
        ...,
        description="Unique email address",
        examples=["alice@example.com"],
    )

    name: str | None = Field(
        default=None,
        max_length=255,
        description="Display name",
        examples=["Alice Liddell"],
    )

    birth_date: date | None = Field(
        default=None,
        description="Date of birth (today or earlier)",
        examples=["1990-05-17"],
    )

    @field_validator("username")
    @classmethod
    def username_required(cls, v: str) -> str:
        return _not_blank(v, "The username is obligatory")

    @field_validator("password")
    @classmethod
    def password_required(cls, v: str) -> str:
        return _not_blank(v, "The password is obligatory")

    @field_validator("birth_date")
    @classmethod
    def birth_date_not_in_future(cls, v: date | None) -> date | None:
        if v is not None and v > date.today():
            raise ValueError("The birth date must be in the past or present")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "alice",
                "password": "SecurePass123",
                "email": "alice@example.com",
                "name": "Alice Liddell",
                "birth_date": "1990-05-17",
            }
        },
    )


class RegisterResponse(BaseModel):
    """Confirmation envelope echoing the new account's username and email."""

    username: str
    email: str
    message: str
    status: bool
