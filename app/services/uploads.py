"""Media uploads to Cloudinary.

Files go to an unsigned upload preset.  Videos and images use different
endpoints of the same cloud; the coarse media type is decided from the
file's declared content type.
"""

from __future__ import annotations

import logging

import httpx

from app.core.config import settings
from app.models.enums import MediaType
from app.models.link import UploadResult

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/{resource}/upload"


class UploadError(RuntimeError):
    """The media provider rejected or failed an upload."""


def media_type_for(content_type: str | None) -> MediaType:
    if content_type and content_type.startswith("video/"):
        return MediaType.video
    return MediaType.image


def upload_endpoint(media_type: MediaType) -> str:
    return CLOUDINARY_UPLOAD_URL.format(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        resource=media_type.value,
    )


async def upload_media(
    filename: str,
    content: bytes,
    content_type: str | None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> UploadResult:
    """Upload one file and return its hosted URL and media type.

    Raises ``UploadError`` on any transport failure, non-2xx response or a
    response without ``secure_url``.
    """
    if not settings.CLOUDINARY_CLOUD_NAME or not settings.CLOUDINARY_UPLOAD_PRESET:
        raise UploadError("Media uploads are not configured")

    media_type = media_type_for(content_type)
    endpoint = upload_endpoint(media_type)

    try:
        async with httpx.AsyncClient(
            timeout=settings.UPLOAD_TIMEOUT_SECONDS,
            transport=transport,
        ) as client:
            response = await client.post(
                endpoint,
                data={"upload_preset": settings.CLOUDINARY_UPLOAD_PRESET},
                files={"file": (filename, content, content_type or "application/octet-stream")},
            )
            response.raise_for_status()
            body = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.error(
            "media_upload_failed",
            extra={
                "upload_filename": filename,
                "media_type": media_type.value,
                "error_type": type(exc).__name__,
                "error_message": str(exc),
            },
        )
        raise UploadError("Failed to upload file. Please try again.") from exc

    url = body.get("secure_url") if isinstance(body, dict) else None
    if not url:
        logger.error("media_upload_missing_url", extra={"upload_filename": filename})
        raise UploadError("Failed to upload file. Please try again.")

    logger.info(
        "media_uploaded",
        extra={"upload_filename": filename, "media_type": media_type.value},
    )
    return UploadResult(url=url, media_type=media_type)
