"""Embed normalisation and media-slot rendering decisions.

Raw third-party embed markup is often fixed-width or missing the permissions
mobile browsers need.  ``normalize_embed`` keeps only the ``src`` of the
snippet and emits an iframe with known sizing and a full permission grant.
``render_media`` decides, per post, what goes into the page's media slot.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass

from markupsafe import Markup, escape

from app.core.constants import (
    EMBED_ALLOW,
    EMBED_HEIGHT,
    EMBED_MIN_HEIGHT,
    EMBED_TITLE,
    YOUTUBE_ALLOW,
)
from app.models.enums import MediaBlockKind, MediaType, VideoPlatform
from app.models.post import Post
from app.services.video import (
    VideoReference,
    extract_youtube_id,
    match_video,
    player_url,
)

logger = logging.getLogger(__name__)

_SRC_RE = re.compile(r"""src=['"]([^'"]+)['"]""")

_IFRAME_TEMPLATE = (
    '<iframe src="{src}" width="100%" height="{height}" '
    'style="border: none; outline: none; width: 100%; height: {height}px; '
    'min-height: {min_height}px; display: block;" '
    'allowfullscreen="true" webkitallowfullscreen="true" mozallowfullscreen="true" '
    'allow="{allow}" referrerpolicy="no-referrer-when-downgrade" '
    'loading="eager" title="{title}">'
    "Your browser does not support iframes."
    "</iframe>"
)

_PLAYER_ALLOW: dict[VideoPlatform, str] = {
    VideoPlatform.youtube: YOUTUBE_ALLOW,
    VideoPlatform.vimeo: "autoplay; fullscreen; picture-in-picture",
    VideoPlatform.tiktok: "encrypted-media",
}

_PLAYER_TITLES: dict[VideoPlatform, str] = {
    VideoPlatform.youtube: "YouTube video",
    VideoPlatform.vimeo: "Vimeo video",
    VideoPlatform.tiktok: "TikTok video",
}


@dataclass(frozen=True)
class MediaBlock:
    """What the template renders in the media slot.

    ``markup`` is only set for ``embed`` blocks.  When ``sandboxed`` is true
    the markup is untouched operator input and must be rendered inside an
    isolated ``srcdoc`` frame rather than the page itself.
    """

    kind: MediaBlockKind
    src: str | None = None
    markup: str | None = None
    alt: str | None = None
    allow: str | None = None
    title: str | None = None
    sandboxed: bool = False


def extract_embed_src(snippet: str | None) -> str | None:
    """Return the first ``src`` attribute value in *snippet*, unescaped."""
    if not snippet:
        return None
    match = _SRC_RE.search(snippet)
    if not match:
        return None
    return html.unescape(match.group(1))


def normalize_embed(raw_snippet: str) -> str:
    """Rewrite *raw_snippet* as a responsive, permission-complete iframe.

    Returns *raw_snippet* unchanged when it carries no ``src`` attribute.
    Normalising an already normalised snippet keeps the same ``src``.
    """
    src = extract_embed_src(raw_snippet)
    if src is None:
        return raw_snippet

    return _IFRAME_TEMPLATE.format(
        src=escape(src),
        height=EMBED_HEIGHT,
        min_height=EMBED_MIN_HEIGHT,
        allow=EMBED_ALLOW,
        title=EMBED_TITLE,
    )


def _looks_like_url(text: str) -> bool:
    return "<" not in text and bool(re.match(r"https?://\S+$", text.strip()))


def render_video_url(url: str) -> MediaBlock:
    """Media block for a bare video URL.

    YouTube, Vimeo and TikTok get their own player iframes; anything else is
    handed to a plain ``<video>`` element.
    """
    ref = match_video(url)
    if ref is not None:
        player = player_url(ref)
        if player is not None:
            is_youtube = ref.platform is VideoPlatform.youtube
            return MediaBlock(
                kind=MediaBlockKind.youtube if is_youtube else MediaBlockKind.player,
                src=player,
                allow=_PLAYER_ALLOW[ref.platform],
                title=_PLAYER_TITLES[ref.platform],
            )
    return MediaBlock(kind=MediaBlockKind.video, src=url.strip())


def render_media(post: Post) -> MediaBlock:
    """Decide what the post page shows in its media slot.

    First applicable wins: YouTube reference in the embed code, any other
    embed code, uploaded media, then an empty-state placeholder.
    """
    if post.embed_code:
        video_id = extract_youtube_id(post.embed_code)
        if video_id:
            return MediaBlock(
                kind=MediaBlockKind.youtube,
                src=player_url(VideoReference(VideoPlatform.youtube, video_id)),
                allow=YOUTUBE_ALLOW,
                title=_PLAYER_TITLES[VideoPlatform.youtube],
            )

        if _looks_like_url(post.embed_code):
            return render_video_url(post.embed_code)

        if extract_embed_src(post.embed_code) is None:
            logger.info("embed_without_src", extra={"post_id": str(post.id)})
            return MediaBlock(kind=MediaBlockKind.embed, markup=post.embed_code, sandboxed=True)
        return MediaBlock(
            kind=MediaBlockKind.embed,
            markup=Markup(normalize_embed(post.embed_code)),
        )

    if post.media_url:
        if post.media_type == MediaType.video:
            return MediaBlock(kind=MediaBlockKind.video, src=post.media_url)
        return MediaBlock(
            kind=MediaBlockKind.image,
            src=post.media_url,
            alt=post.title or "Post image",
        )

    return MediaBlock(kind=MediaBlockKind.empty)
