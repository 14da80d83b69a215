"""Pydantic models for the ``posts`` table.

Covers all columns of ``posts`` in ``sql/schema.sql``.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from app.models.enums import MediaType


class PostCreate(BaseModel):
    """Payload for inserting a new post.

    Text fields are trimmed and blank values become ``None`` so the row never
    stores empty strings.  The title/description and redirect/popunder rules
    are checked by ``app.services.links.validate_post``.
    """
    title: str | None = None
    description: str | None = None
    embed_code: str | None = None
    media_url: str | None = None
    media_type: MediaType | None = None
    thumbnail_url: str | None = None
    redirect_link: str | None = None
    popunder_ad: str | None = None

    @field_validator(
        "title",
        "description",
        "embed_code",
        "media_url",
        "thumbnail_url",
        "redirect_link",
        "popunder_ad",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("media_type", mode="before")
    @classmethod
    def _blank_media_type(cls, value: object) -> object:
        if value == "":
            return None
        return value


class Post(BaseModel):
    """Full post record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str | None = None
    description: str | None = None
    embed_code: str | None = None
    media_url: str | None = None
    media_type: MediaType | None = None
    thumbnail_url: str | None = None
    redirect_link: str | None = None
    popunder_ad: str | None = None
    created_at: datetime

    @field_validator("media_type", mode="before")
    @classmethod
    def _unknown_media_type(cls, value: object) -> object:
        # Rows written by older clients may carry arbitrary strings.
        if value not in (None, *(m.value for m in MediaType)):
            return None
        return value
