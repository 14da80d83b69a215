"""Admin login and logout.

The password is checked server-side; the browser only ever holds the signed
session cookie.
"""

import logging

from fastapi import APIRouter, Form, Request
from fastapi.responses import RedirectResponse

from app.core.security import check_password, is_admin, login, logout

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/login")
async def login_page(request: Request):
    if is_admin(request):
        return RedirectResponse(url="/admin", status_code=303)
    return request.app.state.templates.TemplateResponse(
        request, "admin/login.html", {"error": None}
    )


@router.post("/login")
async def login_submit(request: Request, password: str = Form("")):
    if not check_password(password):
        logger.warning(
            "admin_login_failed",
            extra={"client_host": request.client.host if request.client else None},
        )
        return request.app.state.templates.TemplateResponse(
            request,
            "admin/login.html",
            {"error": "Incorrect password. Please try again."},
            status_code=401,
        )

    login(request)
    logger.info("admin_login_succeeded")
    return RedirectResponse(url="/admin", status_code=303)


@router.post("/logout")
async def logout_submit(request: Request):
    logout(request)
    return RedirectResponse(url="/admin/login", status_code=303)
