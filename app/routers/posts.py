"""Public post page.

``GET /post/{short_code}`` resolves a short link, picks what to show in the
media slot, and hands the per-view overlay/popunder config to the browser.
"""

from __future__ import annotations

import logging
import random

from fastapi import APIRouter, Request

from app.core.constants import COMMENTS_RANGE, LIKES_RANGE, SAMPLE_COMMENTS, VIEWS_RANGE
from app.services.embeds import render_media
from app.services.links import StoreError, get_link_with_post
from app.services.metadata import build_social_metadata, not_found_metadata
from app.services.page_state import PostPageState

logger = logging.getLogger(__name__)

router = APIRouter()


def _engagement_stats() -> dict[str, int]:
    """Decorative counters, re-rolled on every view."""
    return {
        "likes": random.randint(*LIKES_RANGE),
        "comments": random.randint(*COMMENTS_RANGE),
        "views": random.randint(*VIEWS_RANGE),
    }


@router.get("/post/{short_code}")
async def post_page(short_code: str, request: Request):
    templates = request.app.state.templates

    try:
        data = get_link_with_post(short_code)
    except StoreError as exc:
        logger.error(
            "post_page_store_error",
            extra={"link_id": short_code, "error_message": str(exc)},
        )
        return templates.TemplateResponse(
            request, "errors/500.html", {}, status_code=503
        )

    if data is None:
        logger.info("post_page_not_found", extra={"link_id": short_code})
        return templates.TemplateResponse(
            request, "errors/404.html", {"meta": not_found_metadata()}, status_code=404
        )

    post = data.post
    state = PostPageState.from_post(post)

    return templates.TemplateResponse(
        request,
        "post.html",
        {
            "post": post,
            "link": data.link,
            "meta": build_social_metadata(post, short_code),
            "media": render_media(post),
            "state": state,
            "client_config": state.client_config(),
            "stats": _engagement_stats(),
            "comments": SAMPLE_COMMENTS,
        },
    )
