"""Per-page-view state for the public post page.

A post page has two independent pieces of interactive state:

* the "skip ad" overlay, which starts shown and can be dismissed exactly
  once per page load (dismissal opens the redirect link, if any);
* the popunder trigger, a debounced one-shot that allows at most one ad
  injection per re-arm window.

The server decides the initial state and the ad payload and serialises
them into the page as a JSON config; ``static/post.js`` runs both state
machines in the browser, so it never has to parse operator markup.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from app.core.constants import (
    AD_CLEANUP_DELAY_MS,
    AD_FALLBACK_CLEANUP_DELAY_MS,
    AD_REARM_DELAY_MS,
)
from app.models.enums import OverlayState
from app.models.post import Post

logger = logging.getLogger(__name__)

_SCRIPT_SRC_RE = re.compile(r"""src=['"]([^'"]+)['"]""")
_SCRIPT_TAG_RE = re.compile(r"<script[^>]*>|</script>", re.IGNORECASE)

_FRAME_DOCUMENT = (
    "<!DOCTYPE html><html><head><meta charset=\"utf-8\"><title>Ad</title></head>"
    "<body>{snippet}</body></html>"
)

# Sandbox for the hidden ad frame: scripts and popups only, never same-origin.
AD_FRAME_SANDBOX = "allow-scripts allow-popups allow-popups-to-escape-sandbox"


# ---------------------------------------------------------------------------
# Ad injection payload
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AdInjection:
    """Everything the browser needs to run one popunder attempt.

    Primary path: a script element (external ``script_src`` or
    ``inline_script``) plus a hidden off-screen frame rendering
    ``frame_document``; both removed after ``cleanup_delay_ms``.
    Fallback path, used only if the primary one throws: ``fallback_script``
    injected as a document-level script, removed after
    ``fallback_cleanup_delay_ms``.
    """

    script_src: str | None
    inline_script: str | None
    frame_document: str
    fallback_script: str
    cleanup_delay_ms: int = AD_CLEANUP_DELAY_MS
    fallback_cleanup_delay_ms: int = AD_FALLBACK_CLEANUP_DELAY_MS

    def to_dict(self) -> dict[str, Any]:
        return {
            "scriptSrc": self.script_src,
            "inlineScript": self.inline_script,
            "frameDocument": self.frame_document,
            "frameSandbox": AD_FRAME_SANDBOX,
            "fallbackScript": self.fallback_script,
            "cleanupDelayMs": self.cleanup_delay_ms,
            "fallbackCleanupDelayMs": self.fallback_cleanup_delay_ms,
        }


def strip_script_tags(snippet: str) -> str:
    return _SCRIPT_TAG_RE.sub("", snippet)


def build_ad_injection(snippet: str | None) -> AdInjection | None:
    """Turn a stored popunder snippet into an ``AdInjection``.

    A snippet containing ``src=`` is treated as an external script; if the
    attribute cannot be extracted no script element is built and only the
    hidden frame runs.  Anything else is inline script, with its
    ``<script>`` wrapper removed.
    """
    if not snippet or not snippet.strip():
        return None

    script_src: str | None = None
    inline_script: str | None = None
    if "src=" in snippet:
        match = _SCRIPT_SRC_RE.search(snippet)
        if match:
            script_src = match.group(1)
        else:
            logger.warning("popunder_src_unparseable", extra={"snippet_length": len(snippet)})
    else:
        inline_script = strip_script_tags(snippet)

    return AdInjection(
        script_src=script_src,
        inline_script=inline_script,
        frame_document=_FRAME_DOCUMENT.format(snippet=snippet),
        fallback_script=strip_script_tags(snippet),
    )


# ---------------------------------------------------------------------------
# Page view
# ---------------------------------------------------------------------------

@dataclass
class PostPageState:
    """Initial interactive state of one post page view.

    The browser owns the transitions: ``static/post.js`` removes the overlay
    on the first skip activation and fires ``injection`` at most once per
    ``rearm_delay_ms``, ignoring clicks on the skip control.
    """

    redirect_link: str | None = None
    injection: AdInjection | None = None
    overlay: OverlayState = OverlayState.shown
    rearm_delay_ms: int = AD_REARM_DELAY_MS

    @classmethod
    def from_post(cls, post: Post) -> PostPageState:
        return cls(
            redirect_link=post.redirect_link,
            injection=build_ad_injection(post.popunder_ad),
        )

    @property
    def overlay_visible(self) -> bool:
        return self.overlay is OverlayState.shown

    def client_config(self) -> dict[str, Any]:
        """JSON-serialisable config consumed by ``static/post.js``."""
        return {
            "overlay": self.overlay.value,
            "redirectLink": self.redirect_link,
            "popunder": self.injection.to_dict() if self.injection else None,
            "rearmDelayMs": self.rearm_delay_ms,
        }
