"""Application constants.

Contains short-code parameters, rendering dimensions, ad-trigger timings,
and the canned copy shown on public post pages.
"""

# ---------------------------------------------------------------------------
# Short links
# ---------------------------------------------------------------------------
SHORT_CODE_LENGTH: int = 6
SHORT_CODE_ALPHABET: str = "0123456789abcdefghijklmnopqrstuvwxyz"
UNTITLED_LINK_TITLE: str = "Untitled"
MAX_LINK_PAGE_SIZE: int = 100

# ---------------------------------------------------------------------------
# Table names
# ---------------------------------------------------------------------------
POSTS_TABLE: str = "posts"
LINKS_TABLE: str = "generated_links"

# ---------------------------------------------------------------------------
# Embeds / thumbnails
# ---------------------------------------------------------------------------
EMBED_HEIGHT: int = 520
EMBED_MIN_HEIGHT: int = 400
EMBED_TITLE: str = "Video Player"
EMBED_ALLOW: str = (
    "accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; "
    "picture-in-picture; web-share; fullscreen; camera; microphone; payment; "
    "geolocation"
)
YOUTUBE_ALLOW: str = (
    "accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; "
    "picture-in-picture; web-share"
)
PLACEHOLDER_PATH: str = "/static/placeholder.svg"
OG_IMAGE_WIDTH: int = 1200
OG_IMAGE_HEIGHT: int = 630

# ---------------------------------------------------------------------------
# Overlay / popunder timings (milliseconds)
# ---------------------------------------------------------------------------
AD_CLEANUP_DELAY_MS: int = 10_000
AD_REARM_DELAY_MS: int = 10_000
AD_FALLBACK_CLEANUP_DELAY_MS: int = 5_000

# ---------------------------------------------------------------------------
# Public page copy
# ---------------------------------------------------------------------------
DEFAULT_POST_TITLE: str = "Amazing Social Media Content"
DEFAULT_POST_DESCRIPTION: str = (
    "Check out this amazing content! Don't miss this viral post."
)
ARTICLE_SECTION: str = "Entertainment"
ARTICLE_KEYWORDS: str = "viral, social media, entertainment, video, streaming"

SAMPLE_COMMENTS: list[dict[str, str]] = [
    {"name": "Alex Johnson", "comment": "This is amazing! Thanks for sharing 🔥", "time": "1h"},
    {"name": "Sarah Chen", "comment": "Exactly what I was looking for!", "time": "45m"},
    {"name": "Mike Rodriguez", "comment": "Great content as always 👍", "time": "30m"},
]

# Ranges for the decorative engagement counters
LIKES_RANGE: tuple[int, int] = (1000, 3000)
COMMENTS_RANGE: tuple[int, int] = (300, 600)
VIEWS_RANGE: tuple[int, int] = (10_000, 30_000)
