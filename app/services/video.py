"""Video platform detection for URLs and embed snippets.

Each supported platform has one capture pattern.  Patterns are tried in a
fixed order and the first hit wins, so an input that satisfies two patterns
resolves to whichever platform is listed first in ``_PLATFORM_RULES``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from app.models.enums import VideoPlatform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoReference:
    """A recognised video: platform tag plus platform-specific id."""

    platform: VideoPlatform
    video_id: str


# ---------------------------------------------------------------------------
# Pattern rules (order matters)
# ---------------------------------------------------------------------------

_PLATFORM_RULES: list[tuple[VideoPlatform, re.Pattern[str]]] = [
    (
        VideoPlatform.youtube,
        re.compile(
            r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)"
            r"([^\"&?/\s]{11})"
        ),
    ),
    (
        VideoPlatform.tiktok,
        re.compile(
            r"(?:tiktok\.com/@[^/]+/video/|vm\.tiktok\.com/|tiktok\.com/t/)"
            r"([A-Za-z0-9]+)"
        ),
    ),
    (
        VideoPlatform.instagram,
        re.compile(r"(?:instagram\.com/(?:p|reel|tv)/|instagr\.am/p/)([A-Za-z0-9_-]+)"),
    ),
    (
        VideoPlatform.vimeo,
        re.compile(r"vimeo\.com/([0-9]+)"),
    ),
    (
        VideoPlatform.facebook,
        re.compile(r"(?:facebook\.com/.*/videos/|fb\.watch/)([0-9]+)"),
    ),
    (
        VideoPlatform.twitter,
        re.compile(r"(?:twitter\.com/.*/status/|x\.com/.*/status/)([0-9]+)"),
    ),
]

# Legacy matcher used for stored embed snippets; YouTube only.
_LEGACY_YOUTUBE_RE = re.compile(
    r"(?:youtube\.com/embed/|youtu\.be/|youtube\.com/watch\?v=)([a-zA-Z0-9_-]{11})"
)

YOUTUBE_THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

_PLAYER_URLS: dict[VideoPlatform, str] = {
    VideoPlatform.youtube: (
        "https://www.youtube.com/embed/{video_id}"
        "?enablejsapi=1&controls=1&modestbranding=1&rel=0"
    ),
    VideoPlatform.vimeo: (
        "https://player.vimeo.com/video/{video_id}?title=0&byline=0&portrait=0"
    ),
    VideoPlatform.tiktok: "https://www.tiktok.com/embed/v2/{video_id}",
}


def match_video(text: str | None) -> VideoReference | None:
    """Identify the video platform referenced by *text*.

    *text* may be a bare URL or any string containing one.  Returns ``None``
    when no rule matches; callers then treat the input as a direct media URL.
    """
    if not text:
        return None

    for platform, pattern in _PLATFORM_RULES:
        match = pattern.search(text)
        if match:
            return VideoReference(platform=platform, video_id=match.group(1))

    logger.debug("video_url_unmatched", extra={"input_length": len(text)})
    return None


def extract_youtube_id(embed_snippet: str | None) -> str | None:
    """Return the YouTube id inside a stored embed snippet, if any."""
    if not embed_snippet:
        return None
    match = _LEGACY_YOUTUBE_RE.search(embed_snippet)
    return match.group(1) if match else None


def youtube_thumbnail(video_id: str) -> str:
    return YOUTUBE_THUMBNAIL_URL.format(video_id=video_id)


def player_url(ref: VideoReference) -> str | None:
    """Embeddable player URL, for the platforms that expose one by id."""
    template = _PLAYER_URLS.get(ref.platform)
    if template is None:
        return None
    return template.format(video_id=ref.video_id)
