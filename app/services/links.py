"""Post and short-link persistence in Supabase.

A post and its public link are written as two sequential inserts with no
transaction around them.  If the link insert fails the post row stays
behind; that orphan is logged and left alone.  Deleting a post relies on
the ``ON DELETE CASCADE`` rule of ``generated_links.post_id``.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any
from uuid import UUID

from app.core.constants import (
    LINKS_TABLE,
    MAX_LINK_PAGE_SIZE,
    POSTS_TABLE,
    SHORT_CODE_ALPHABET,
    SHORT_CODE_LENGTH,
    UNTITLED_LINK_TITLE,
)
from app.db.supabase import get_supabase
from app.models.link import Link, LinkCreate, LinkWithPost
from app.models.post import Post, PostCreate

logger = logging.getLogger(__name__)


class PostValidationError(ValueError):
    """A post payload broke a creation rule; nothing was written."""


class StoreError(RuntimeError):
    """A Supabase call failed; the message carries the store's own text."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def generate_short_code() -> str:
    """Return a random 6-character lowercase base-36 code.

    Uniqueness is enforced by the store; a collision surfaces as a
    ``StoreError`` from ``create_post_with_link``.
    """
    return "".join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(SHORT_CODE_LENGTH))


def validate_post(payload: PostCreate) -> None:
    """Raise ``PostValidationError`` unless *payload* may be created."""
    if not payload.title and not payload.description:
        raise PostValidationError("Either Title or Description is required.")
    if not payload.redirect_link and not payload.popunder_ad:
        raise PostValidationError(
            "At least one of Redirect Link or Popunder Ad is required."
        )


def _error_text(exc: Exception) -> str:
    # postgrest APIError keeps the store text in .message; str() is a dict repr
    return getattr(exc, "message", None) or str(exc)


def _first_row(result: Any) -> dict[str, Any] | None:
    data = result.data if result is not None else None
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

def create_post_with_link(payload: PostCreate) -> tuple[Post, Link]:
    """Validate *payload*, insert the post, then insert its short link.

    Raises ``PostValidationError`` before any write, or ``StoreError`` if
    either insert fails.
    """
    validate_post(payload)
    client = get_supabase()

    try:
        post_result = (
            client.table(POSTS_TABLE)
            .insert(payload.model_dump(mode="json"))
            .execute()
        )
    except Exception as exc:
        logger.error("post_insert_failed", extra={"error_message": _error_text(exc)})
        raise StoreError(f"Failed to create post: {_error_text(exc)}") from exc

    row = _first_row(post_result)
    if row is None:
        raise StoreError("Failed to create post: no row returned")
    post = Post(**row)

    link_payload = LinkCreate(
        post_id=post.id,
        link_id=generate_short_code(),
        title=payload.title or payload.description or UNTITLED_LINK_TITLE,
    )
    try:
        link_result = (
            client.table(LINKS_TABLE)
            .insert(link_payload.model_dump(mode="json"))
            .execute()
        )
    except Exception as exc:
        logger.error(
            "link_insert_failed",
            extra={
                "post_id": str(post.id),
                "link_id": link_payload.link_id,
                "error_message": _error_text(exc),
            },
        )
        raise StoreError(f"Failed to create link: {_error_text(exc)}") from exc

    row = _first_row(link_result)
    if row is None:
        raise StoreError("Failed to create link: no row returned")
    link = Link(**row)

    logger.info(
        "post_link_created",
        extra={"post_id": str(post.id), "link_id": link.link_id},
    )
    return post, link


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

def list_links(limit: int = 10) -> list[Link]:
    """Return the newest links first, at most *limit* (capped at 100)."""
    limit = max(1, min(limit, MAX_LINK_PAGE_SIZE))
    client = get_supabase()
    try:
        result = (
            client.table(LINKS_TABLE)
            .select("*")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as exc:
        logger.error("link_list_failed", extra={"error_message": _error_text(exc)})
        raise StoreError(f"Failed to load links: {_error_text(exc)}") from exc

    return [Link(**row) for row in result.data or []]


def get_link_with_post(short_code: str) -> LinkWithPost | None:
    """Resolve a public short code to its link and post.

    Returns ``None`` when the code is unknown or the post row is gone.
    """
    client = get_supabase()
    try:
        result = (
            client.table(LINKS_TABLE)
            .select("*, posts(*)")
            .eq("link_id", short_code)
            .limit(1)
            .execute()
        )
    except Exception as exc:
        logger.error(
            "link_lookup_failed",
            extra={"link_id": short_code, "error_message": _error_text(exc)},
        )
        raise StoreError(f"Failed to load post: {_error_text(exc)}") from exc

    row = _first_row(result)
    if row is None:
        return None

    post_row = row.pop("posts", None)
    if isinstance(post_row, list):
        post_row = post_row[0] if post_row else None
    if not post_row:
        logger.warning("link_without_post", extra={"link_id": short_code})
        return None

    return LinkWithPost(link=Link(**row), post=Post(**post_row))


def get_link(link_uuid: UUID) -> Link | None:
    """Return the link with primary key *link_uuid*, if any."""
    client = get_supabase()
    try:
        result = (
            client.table(LINKS_TABLE)
            .select("*")
            .eq("id", str(link_uuid))
            .limit(1)
            .execute()
        )
    except Exception as exc:
        logger.error(
            "link_get_failed",
            extra={"id": str(link_uuid), "error_message": _error_text(exc)},
        )
        raise StoreError(f"Failed to load link: {_error_text(exc)}") from exc

    row = _first_row(result)
    return Link(**row) if row else None


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

def delete_post(post_id: UUID) -> None:
    """Delete a post; its link goes with it through the cascade rule."""
    client = get_supabase()
    try:
        client.table(POSTS_TABLE).delete().eq("id", str(post_id)).execute()
    except Exception as exc:
        logger.error(
            "post_delete_failed",
            extra={"post_id": str(post_id), "error_message": _error_text(exc)},
        )
        raise StoreError(f"Failed to delete post: {_error_text(exc)}") from exc

    logger.info("post_deleted", extra={"post_id": str(post_id)})
