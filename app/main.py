"""FastAPI application entry point.

Configures CORS, signed admin sessions, structured logging, templates,
static files, and router registration.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from app.core.config import settings
from app.core.logging import setup_logging
from app.core.security import LoginRequired
from app.routers import admin, auth, health, links, posts
from app.services.metadata import not_found_metadata

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks."""
    setup_logging()
    logger.info("Application starting up")
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Postwrap",
    description="Short public links for social media posts with interstitial monetization",
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------
_raw_origins = settings.ALLOWED_ORIGINS.strip()
if _raw_origins == "*":
    _allowed_origins: list[str] = ["*"]
else:
    _allowed_origins = [o.strip() for o in _raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET,
    session_cookie="postwrap_session",
    same_site="lax",
    https_only=settings.SITE_URL.startswith("https://"),
)

# ---------------------------------------------------------------------------
# Templates & static files
# ---------------------------------------------------------------------------
app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")
app.state.templates = Jinja2Templates(directory=BASE_DIR / "templates")


def format_count(num: int) -> str:
    """Compact counter: 1234 -> "1.2k"."""
    if num >= 1000:
        return f"{num / 1000:.1f}k"
    return str(num)


def initials(name: str) -> str:
    return "".join(part[0] for part in name.split() if part)


app.state.templates.env.filters["format_count"] = format_count
app.state.templates.env.filters["initials"] = initials
app.state.templates.env.globals["site_name"] = settings.SITE_NAME

# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(posts.router, tags=["Public"])
app.include_router(auth.router, prefix="/admin", tags=["Admin"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(links.router, prefix="/api/v1", tags=["Links"])


@app.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url="/admin", status_code=303)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
    return RedirectResponse(url="/admin/login", status_code=303)


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    if request.url.path.startswith("/api/"):
        return await http_exception_handler(request, exc)
    return app.state.templates.TemplateResponse(
        request, "errors/404.html", {"meta": not_found_metadata()}, status_code=404
    )
