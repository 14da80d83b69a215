"""Admin panel: create posts, list recent links, delete posts.

Every failure re-renders the panel with the operator's input preserved, so
a failed upload or insert can be retried without retyping the form.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from app.core.config import settings
from app.core.security import require_admin_page
from app.models.enums import MediaType
from app.models.link import Link
from app.models.post import PostCreate
from app.services.links import (
    PostValidationError,
    StoreError,
    create_post_with_link,
    delete_post,
    list_links,
    validate_post,
)
from app.services.metadata import post_url
from app.services.uploads import UploadError, upload_media

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin_page)])

FORM_FIELDS = (
    "title",
    "description",
    "embed_code",
    "media_url",
    "media_type",
    "thumbnail_url",
    "redirect_link",
    "popunder_ad",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _empty_form() -> dict[str, str]:
    return {name: "" for name in FORM_FIELDS}


def _load_history() -> tuple[list[Link], str | None]:
    """Recent links, or an empty list plus a setup hint if the store fails."""
    try:
        return list_links(settings.LINK_HISTORY_LIMIT), None
    except StoreError as exc:
        return [], (
            f"{exc}. If this is a fresh project, run sql/schema.sql in the "
            "Supabase SQL editor to create the tables."
        )


def _render_panel(
    request: Request,
    form: dict[str, str] | None = None,
    error: str | None = None,
    notice: str | None = None,
    status_code: int = 200,
):
    links, history_error = _load_history()
    context: dict[str, Any] = {
        "form": form or _empty_form(),
        "error": error,
        "notice": notice,
        "links": links,
        "history_error": history_error,
        "link_url": post_url,
    }
    return request.app.state.templates.TemplateResponse(
        request, "admin/index.html", context, status_code=status_code
    )


def _has_file(upload: UploadFile | None) -> bool:
    return upload is not None and bool(upload.filename)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.get("")
async def panel(request: Request, created: str | None = None, deleted: bool = False):
    notice = None
    if created:
        notice = f"Link generated successfully! URL: {post_url(created)}"
    elif deleted:
        notice = "Link deleted."
    return _render_panel(request, notice=notice)


@router.post("/posts")
async def create_post(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    embed_code: str = Form(""),
    media_url: str = Form(""),
    media_type: str = Form(""),
    thumbnail_url: str = Form(""),
    redirect_link: str = Form(""),
    popunder_ad: str = Form(""),
    media: UploadFile | None = File(None),
    thumbnail: UploadFile | None = File(None),
):
    form = {
        "title": title,
        "description": description,
        "embed_code": embed_code,
        "media_url": media_url,
        "media_type": media_type,
        "thumbnail_url": thumbnail_url,
        "redirect_link": redirect_link,
        "popunder_ad": popunder_ad,
    }

    try:
        validate_post(PostCreate(**form))
    except ValidationError:
        form["media_type"] = ""
        return _render_panel(
            request,
            form,
            error=f"Media type must be one of: {', '.join(m.value for m in MediaType)}.",
            status_code=422,
        )
    except PostValidationError as exc:
        return _render_panel(request, form, error=str(exc), status_code=422)

    if _has_file(thumbnail):
        if not (thumbnail.content_type or "").startswith("image/"):
            return _render_panel(
                request,
                form,
                error="Please select an image file for thumbnail.",
                status_code=422,
            )
        try:
            uploaded = await upload_media(
                thumbnail.filename, await thumbnail.read(), thumbnail.content_type
            )
        except UploadError as exc:
            return _render_panel(request, form, error=f"Thumbnail: {exc}", status_code=502)
        form["thumbnail_url"] = uploaded.url

    if _has_file(media):
        try:
            uploaded = await upload_media(media.filename, await media.read(), media.content_type)
        except UploadError as exc:
            return _render_panel(request, form, error=str(exc), status_code=502)
        form["media_url"] = uploaded.url
        form["media_type"] = uploaded.media_type.value

    try:
        _, link = create_post_with_link(PostCreate(**form))
    except PostValidationError as exc:
        return _render_panel(request, form, error=str(exc), status_code=422)
    except StoreError as exc:
        return _render_panel(request, form, error=str(exc), status_code=502)

    return RedirectResponse(url=f"/admin?created={link.link_id}", status_code=303)


@router.post("/posts/{post_id}/delete")
async def remove_post(post_id: UUID, request: Request):
    try:
        delete_post(post_id)
    except StoreError as exc:
        return _render_panel(request, error=str(exc), status_code=502)
    return RedirectResponse(url="/admin?deleted=true", status_code=303)
