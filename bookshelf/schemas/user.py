"""
User Profile Pydantic Schemas

Schemas:
- ProfileUpdate: Partial update of a profile (PUT /users/{id})
- ProfileResponse: Public profile view with the ids of owned books
"""

import uuid
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookshelf.models import Profile


class ProfileUpdate(BaseModel):
    """
    Schema for updating a profile.

    Blank strings and missing fields leave the stored value unchanged.
    book_ids replaces the whole collection, but only when it is a non-empty
    list; ids that do not exist in the catalog are skipped.
    """

    username: str | None = Field(
        default=None,
        max_length=50,
        description="Display username",
    )

    name: str | None = Field(
        default=None,
        max_length=255,
        description="Display name",
    )

    birth_date: date | None = Field(
        default=None,
        description="Date of birth (today or earlier)",
    )

    book_ids: list[uuid.UUID] | None = Field(
        default=None,
        description="Ids of the books the profile owns (replaces existing)",
    )

    @field_validator("birth_date")
    @classmethod
    def birth_date_not_in_future(cls, v: date | None) -> date | None:
        if v is not None and v > date.today():
            raise ValueError("The birth date must be in the past or present")
        return v


class ProfileResponse(BaseModel):
    """Schema for profile responses."""

    id: uuid.UUID = Field(..., description="Identity key shared with the credential")
    username: str = Field(..., description="Display username")
    name: str | None = Field(default=None, description="Display name")
    birth_date: date | None = Field(default=None, description="Date of birth")
    book_ids: list[uuid.UUID] = Field(
        default_factory=list,
        description="Ids of the books the profile owns",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "6f1c2f0e-3a0b-4b8e-9a55-0d3d2b1d8a11",
                "username": "alice",
                "name": "Alice Liddell",
                "birth_date": "1990-05-17",
                "book_ids": ["0c6b7d7e-8a4f-4f5c-9f3a-1f7d9a0b2c33"],
            }
        },
    )

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            username=profile.username,
            name=profile.name,
            birth_date=profile.birth_date,
            book_ids=[book.id for book in profile.books],
        )
