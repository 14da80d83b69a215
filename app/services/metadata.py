"""Open Graph, Twitter card and JSON-LD metadata for public post pages."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from app.core.config import settings
from app.core.constants import (
    ARTICLE_KEYWORDS,
    ARTICLE_SECTION,
    DEFAULT_POST_DESCRIPTION,
    DEFAULT_POST_TITLE,
    OG_IMAGE_HEIGHT,
    OG_IMAGE_WIDTH,
)
from app.models.post import Post
from app.services.thumbnails import resolve_thumbnail


@dataclass
class SocialMetadata:
    """Head tags for one page.

    ``properties`` render as ``<meta property=...>``, ``names`` as
    ``<meta name=...>``; both keep insertion order.
    """

    title: str
    description: str
    image: str | None = None
    canonical_url: str | None = None
    properties: list[tuple[str, str]] = field(default_factory=list)
    names: list[tuple[str, str]] = field(default_factory=list)
    json_ld: dict[str, Any] | None = None


def post_url(short_code: str) -> str:
    return f"{settings.site_url}/post/{short_code}"


def image_mime_type(url: str) -> str | None:
    """MIME type guessed from the URL path, only if it names an image."""
    mime, _ = mimetypes.guess_type(urlsplit(url).path)
    if mime and mime.startswith("image/"):
        return mime
    return None


def display_title(post: Post) -> str:
    return (post.title or "").strip() or (post.description or "").strip() or DEFAULT_POST_TITLE


def display_description(post: Post) -> str:
    return (
        (post.description or "").strip()
        or (post.title or "").strip()
        or DEFAULT_POST_DESCRIPTION
    )


def build_social_metadata(post: Post, short_code: str) -> SocialMetadata:
    """Build every head tag for the public page of *post*."""
    title = display_title(post)
    description = display_description(post)
    image = resolve_thumbnail(post)
    url = post_url(short_code)
    published = post.created_at.isoformat()

    image_tags = [("og:image", image), ("og:image:secure_url", image)]
    image_type = image_mime_type(image)
    if image_type:
        image_tags.append(("og:image:type", image_type))

    properties = [
        ("og:type", "article"),
        ("og:site_name", settings.SITE_NAME),
        ("og:locale", "en_US"),
        ("og:title", title),
        ("og:description", description),
        ("og:url", url),
        *image_tags,
        ("og:image:width", str(OG_IMAGE_WIDTH)),
        ("og:image:height", str(OG_IMAGE_HEIGHT)),
        ("og:image:alt", title),
        ("article:author", settings.SITE_NAME),
        ("article:published_time", published),
        ("article:section", ARTICLE_SECTION),
        ("al:web:url", url),
    ]
    names = [
        ("description", description),
        ("twitter:card", "summary_large_image"),
        ("twitter:title", title),
        ("twitter:description", description),
        ("twitter:image", image),
        ("twitter:image:alt", title),
    ]
    json_ld = {
        "@context": "https://schema.org",
        "@type": "Article",
        "headline": title,
        "description": description,
        "image": [image],
        "author": {"@type": "Organization", "name": settings.SITE_NAME, "url": settings.site_url},
        "publisher": {
            "@type": "Organization",
            "name": settings.SITE_NAME,
            "logo": {"@type": "ImageObject", "url": f"{settings.site_url}/static/logo.svg"},
        },
        "datePublished": published,
        "dateModified": published,
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
        "articleSection": ARTICLE_SECTION,
        "keywords": ARTICLE_KEYWORDS,
    }

    return SocialMetadata(
        title=title,
        description=description,
        image=image,
        canonical_url=url,
        properties=properties,
        names=names,
        json_ld=json_ld,
    )


def not_found_metadata() -> SocialMetadata:
    return SocialMetadata(
        title="Post Not Found",
        description="The requested post could not be found.",
    )
