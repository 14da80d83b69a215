"""JSON API for posts, links and uploads.

All endpoints require an admin session (see ``app.core.security``).
"""

from __future__ import annotations

import logging
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile

from app.core.config import settings
from app.core.constants import MAX_LINK_PAGE_SIZE
from app.core.security import require_admin_api
from app.models.link import CreatedLink, Link, UploadResult
from app.models.post import PostCreate
from app.services.links import (
    PostValidationError,
    StoreError,
    create_post_with_link,
    delete_post,
    get_link,
    list_links,
)
from app.services.metadata import post_url
from app.services.uploads import UploadError, upload_media

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin_api)])


@router.get("/links", response_model=list[Link])
async def get_links(
    limit: int = Query(
        settings.LINK_HISTORY_LIMIT,
        ge=1,
        le=MAX_LINK_PAGE_SIZE,
        description="Maximum number of links, newest first",
    ),
) -> list[Link]:
    try:
        return list_links(limit)
    except StoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.post("/links", response_model=CreatedLink, status_code=201)
async def create_link(body: PostCreate) -> CreatedLink:
    """Create a post and mint its short public link."""
    try:
        post, link = create_post_with_link(body)
    except PostValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return CreatedLink(post=post, link=link, url=post_url(link.link_id))


@router.get("/links/{link_uuid}", response_model=Link)
async def read_link(link_uuid: UUID) -> Link:
    try:
        link = get_link(link_uuid)
    except StoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    if link is None:
        raise HTTPException(status_code=404, detail="Link not found")
    return link


@router.delete("/posts/{post_id}", status_code=204)
async def remove_post(post_id: UUID) -> Response:
    """Delete a post together with its link."""
    try:
        delete_post(post_id)
    except StoreError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return Response(status_code=204)


@router.post("/uploads", response_model=UploadResult)
async def upload(
    file: UploadFile = File(...),
    purpose: Literal["media", "thumbnail"] = Query("media"),
) -> UploadResult:
    """Upload a media file (or a thumbnail image) to the media host."""
    if purpose == "thumbnail" and not (file.content_type or "").startswith("image/"):
        raise HTTPException(
            status_code=422, detail="Please select an image file for thumbnail."
        )
    try:
        return await upload_media(file.filename or "upload", await file.read(), file.content_type)
    except UploadError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
