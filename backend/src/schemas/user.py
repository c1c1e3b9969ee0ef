"""Pydantic schemas for user profile endpoints."""
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from schemas.common import CamelModel


class UserUpdate(CamelModel):
    """
    Schema for editing the current user's profile.

    Only fields present in the request body are applied. first_name and
    last_name may be cleared with null; email may be changed but not removed.
    """

    email: EmailStr | None = None
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)

    @field_validator("email")
    @classmethod
    def email_not_null(cls, v: str | None) -> str:
        """Reject an explicit null email."""
        if v is None:
            raise ValueError("email cannot be null")
        return v


class UserResponse(CamelModel):
    """Public profile of a user (the password hash is never exposed)."""

    id: int
    email: str
    first_name: str | None
    last_name: str | None
    created_at: datetime
    updated_at: datetime
