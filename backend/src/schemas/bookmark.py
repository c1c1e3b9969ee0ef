"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime

from pydantic import Field, field_validator

from schemas.common import CamelModel


MAX_TITLE_LENGTH = 500
MAX_LINK_LENGTH = 2048


class BookmarkCreate(CamelModel):
    """Schema for creating a new bookmark."""

    link: str = Field(min_length=1, max_length=MAX_LINK_LENGTH)
    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str | None = None


class BookmarkUpdate(CamelModel):
    """Schema for updating an existing bookmark. Omitted fields are left unchanged."""

    link: str | None = Field(default=None, min_length=1, max_length=MAX_LINK_LENGTH)
    title: str | None = Field(default=None, min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str | None = None

    @field_validator("link", "title")
    @classmethod
    def required_fields_not_null(cls, v: str | None) -> str:
        """link and title may be omitted but not set to null."""
        if v is None:
            raise ValueError("field cannot be null")
        return v


class BookmarkResponse(CamelModel):
    """Schema for bookmark responses."""

    id: int
    user_id: int
    link: str
    title: str
    description: str | None
    created_at: datetime
    updated_at: datetime
