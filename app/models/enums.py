"""Enum types shared by models, services and templates."""

from enum import Enum


class MediaType(str, Enum):
    """Coarse kind of an uploaded media file."""
    image = "image"
    video = "video"


class VideoPlatform(str, Enum):
    """Video platforms recognised by the URL matcher."""
    youtube = "youtube"
    vimeo = "vimeo"
    tiktok = "tiktok"
    instagram = "instagram"
    facebook = "facebook"
    twitter = "twitter"


class MediaBlockKind(str, Enum):
    """What the post page renders in its media slot."""
    youtube = "youtube"
    player = "player"
    embed = "embed"
    video = "video"
    image = "image"
    empty = "empty"


class OverlayState(str, Enum):
    """Lifecycle of the interstitial "skip ad" overlay for one page view."""
    shown = "shown"
    dismissed = "dismissed"
