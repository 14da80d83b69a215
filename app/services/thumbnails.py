"""Preview image selection for posts.

``resolve_thumbnail`` feeds both the post page and the social-sharing tags,
so every branch must yield a directly fetchable image URL.
"""

from __future__ import annotations

from app.core.config import settings
from app.core.constants import OG_IMAGE_HEIGHT, OG_IMAGE_WIDTH, PLACEHOLDER_PATH
from app.models.enums import MediaType
from app.models.post import Post, PostCreate
from app.services.video import extract_youtube_id, youtube_thumbnail


def placeholder_image(text: str = "Social+Media+Post") -> str:
    """Absolute URL of the generic placeholder image."""
    return (
        f"{settings.site_url}{PLACEHOLDER_PATH}"
        f"?height={OG_IMAGE_HEIGHT}&width={OG_IMAGE_WIDTH}&text={text}"
    )


def resolve_thumbnail(post: Post | PostCreate) -> str:
    """Pick the single best preview image for *post*.

    First applicable rule wins:

    1. operator-supplied ``thumbnail_url``
    2. ``media_url`` of an uploaded image
    3. YouTube thumbnail derived from ``embed_code``
    4. ``media_url`` of an uploaded video
    5. the placeholder image

    Rule 4 hands a video file URL to consumers that expect an image.  It is
    kept because existing shared links rely on it.
    """
    if post.thumbnail_url:
        return post.thumbnail_url

    if post.media_url and post.media_type == MediaType.image:
        return post.media_url

    video_id = extract_youtube_id(post.embed_code)
    if video_id:
        return youtube_thumbnail(video_id)

    if post.media_url and post.media_type == MediaType.video:
        return post.media_url

    return placeholder_image()
