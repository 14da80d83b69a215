"""Pydantic models for the ``generated_links`` table and link API responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.models.enums import MediaType
from app.models.post import Post


class LinkCreate(BaseModel):
    """Payload for inserting a new generated link."""
    post_id: UUID
    link_id: str
    title: str


class Link(BaseModel):
    """Full generated_links record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID | None = None
    link_id: str
    title: str | None = None
    created_at: datetime


class LinkWithPost(BaseModel):
    """A link joined with the post it points at."""
    link: Link
    post: Post


class CreatedLink(BaseModel):
    """Response for a successful post + link creation."""
    post: Post
    link: Link
    url: str


class UploadResult(BaseModel):
    """Hosted media returned by the upload provider."""
    url: str
    media_type: MediaType
