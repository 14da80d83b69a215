"""Admin session handling.

The admin password only ever lives in server settings.  A successful login
sets ``session["is_admin"]`` in Starlette's signed session cookie; the
dependencies below gate the admin panel and the JSON API on that flag.
"""

import logging
import secrets

from fastapi import HTTPException, Request

from app.core.config import settings

logger = logging.getLogger(__name__)

SESSION_ADMIN_KEY = "is_admin"


class LoginRequired(Exception):
    """Raised by HTML routes when there is no admin session."""


def check_password(candidate: str) -> bool:
    """Constant-time comparison against ``settings.ADMIN_PASSWORD``.

    An empty configured password never matches, so an unconfigured
    deployment cannot be logged into.
    """
    if not settings.ADMIN_PASSWORD:
        logger.warning("admin_password_not_configured")
        return False
    return secrets.compare_digest(candidate.encode(), settings.ADMIN_PASSWORD.encode())


def is_admin(request: Request) -> bool:
    return bool(request.session.get(SESSION_ADMIN_KEY))


def login(request: Request) -> None:
    request.session[SESSION_ADMIN_KEY] = True


def logout(request: Request) -> None:
    request.session.clear()


def require_admin_page(request: Request) -> None:
    """Dependency for HTML admin routes; unauthenticated users are redirected."""
    if not is_admin(request):
        raise LoginRequired()


def require_admin_api(request: Request) -> None:
    """Dependency for JSON API routes; unauthenticated calls get 401."""
    if not is_admin(request):
        raise HTTPException(status_code=401, detail="Admin session required")
