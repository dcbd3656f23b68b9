from __future__ import annotations

import logging

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from storefront.core import csrf
from storefront.core.config import get_settings
from storefront.core.rate_limiter import rate_limit_ip
from storefront.routers.common import (
    current_user,
    get_session_service,
    get_user_service,
    home_for,
    render,
)
from storefront.services.session_service import SESSION_COOKIE_NAME, clear_session_cookie, set_session_cookie
from storefront.services.user_service import UserValidationError

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)

LOGIN_FAILED = "Login gagal: email atau password salah"
PASSWORD_MISMATCH = "Password dan konfirmasi password tidak cocok"
EMAIL_TAKEN = "Email sudah terdaftar"
REGISTERED = "Registrasi berhasil! Silakan login."


def _rate_limit(request: Request, scope: str) -> None:
    settings = get_settings()
    rate_limit_ip(
        request,
        scope,
        limit=settings.login_rate_limit,
        window_seconds=settings.login_rate_window_seconds,
        trust_forwarded_for=settings.trust_forwarded_for,
    )


@router.get("/", response_class=HTMLResponse)
@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    user = current_user(request)
    if user is not None:
        return RedirectResponse(home_for(user), status_code=303)
    return render(request, "login.html")


@router.post("/login")
def do_login(request: Request, email: str = Form(""), password: str = Form(""), csrf_token: str = Form("")):
    _rate_limit(request, "auth:login")
    csrf.validate_csrf(request, csrf_token)
    user = get_user_service(request).authenticate(email, password)
    if user is None:
        logger.warning("Failed login for %s", (email or "").strip())
        return render(request, "login.html", {"error": LOGIN_FAILED, "email": email})
    token = get_session_service(request).issue_session(user)
    logger.info("User %s logged in", user.email)
    resp = RedirectResponse(home_for(user), status_code=303)
    set_session_cookie(resp, token)
    return resp


@router.post("/logout")
def logout(request: Request, csrf_token: str = Form("")):
    csrf.validate_csrf(request, csrf_token)
    get_session_service(request).delete_session(request.cookies.get(SESSION_COOKIE_NAME))
    resp = RedirectResponse("/login", status_code=303)
    clear_session_cookie(resp)
    return resp


@router.get("/register", response_class=HTMLResponse)
def register_page(request: Request):
    return render(request, "register.html")


@router.post("/register")
def do_register(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form("", alias="confirmPassword"),
    csrf_token: str = Form(""),
):
    _rate_limit(request, "auth:register")
    csrf.validate_csrf(request, csrf_token)
    if password != confirm_password:
        return render(request, "register.html", {"error": PASSWORD_MISMATCH, "email": email})
    try:
        created = get_user_service(request).register_user(email, password)
    except UserValidationError as exc:
        return render(request, "register.html", {"error": exc.message, "email": email})
    if not created:
        return render(request, "register.html", {"error": EMAIL_TAKEN, "email": email})
    return render(request, "login.html", {"success": REGISTERED, "email": email})
