"""
Double-submit CSRF protection for the HTML forms.

Every rendered page carries the same token twice: in the ``csrf_token``
cookie and in a hidden form field. A POST passes only when both match and,
when the browser sent Origin or Referer, that URL names this host and scheme.
"""
from __future__ import annotations

import secrets
from typing import Optional
from urllib.parse import urlsplit

from fastapi import HTTPException, Request, Response

from storefront.core.config import get_settings

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "x-csrf-token"
CSRF_COOKIE_MAX_AGE = 7 * 24 * 60 * 60
MIN_TOKEN_LENGTH = 16


def token_for(request: Request) -> str:
    """Reuse the browser's token when it looks sane, else mint a new one."""
    current = request.cookies.get(CSRF_COOKIE_NAME) or ""
    if len(current) >= MIN_TOKEN_LENGTH:
        return current
    return secrets.token_urlsafe(32)


def attach_token(response: Response, token: str) -> None:
    # readable by the page, so not httponly
    response.set_cookie(
        CSRF_COOKIE_NAME,
        token,
        max_age=CSRF_COOKIE_MAX_AGE,
        httponly=False,
        secure=get_settings().app_env == "prod",
        samesite="strict",
        path="/",
    )


def _submitted_token(request: Request, form_value: Optional[str]) -> str:
    return (form_value or "").strip() or (request.headers.get(CSRF_HEADER_NAME) or "").strip()


def _check_same_origin(request: Request) -> None:
    source = request.headers.get("origin") or request.headers.get("referer")
    if not source:
        return
    try:
        parts = urlsplit(source)
    except ValueError:
        raise HTTPException(403, "Origin tidak valid.")
    host = (request.headers.get("host") or "").split(":", 1)[0].lower()
    if parts.hostname and host and parts.hostname.lower() != host:
        raise HTTPException(403, "Origin tidak valid.")
    if parts.scheme and parts.scheme != request.url.scheme:
        raise HTTPException(403, "Origin tidak valid.")


def validate_csrf(request: Request, form_value: Optional[str]) -> None:
    """Raise 403 unless the submitted token matches the cookie and the origin is ours."""
    expected = request.cookies.get(CSRF_COOKIE_NAME)
    submitted = _submitted_token(request, form_value)
    if not expected or not submitted:
        raise HTTPException(403, "CSRF token tidak ada.")
    if not secrets.compare_digest(expected.encode(), submitted.encode()):
        raise HTTPException(403, "CSRF token tidak valid.")
    _check_same_origin(request)
