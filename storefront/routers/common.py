"""Helpers shared by the routers (state lookup, rendering, guards)."""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from storefront.core import csrf
from storefront.domain.models import User
from storefront.services.product_service import ProductService
from storefront.services.session_service import SessionService
from storefront.services.transaction_service import TransactionService
from storefront.services.user_service import UserService


def _state(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} belum dikonfigurasi")
    return value


def get_templates(request: Request) -> Jinja2Templates:
    return _state(request, "templates")


def get_user_service(request: Request) -> UserService:
    return _state(request, "user_service")


def get_product_service(request: Request) -> ProductService:
    return _state(request, "product_service")


def get_transaction_service(request: Request) -> TransactionService:
    return _state(request, "transaction_service")


def get_session_service(request: Request) -> SessionService:
    return _state(request, "session_service")


def current_user(request: Request) -> Optional[User]:
    return get_session_service(request).current_user(request)


def home_for(user: User) -> str:
    return "/admin" if user.is_admin else "/user"


def require_user(request: Request) -> User:
    user = current_user(request)
    if user is None:
        raise HTTPException(401, "belum login")
    return user


def require_admin(request: Request) -> User:
    user = require_user(request)
    if not user.is_admin:
        raise HTTPException(403, "forbidden")
    return user


def login_redirect() -> RedirectResponse:
    return RedirectResponse("/login", status_code=303)


def to_int(value: Optional[str], default: Optional[int] = None) -> Optional[int]:
    try:
        return int((value or "").strip())
    except ValueError:
        return default


def render(request: Request, name: str, context: Optional[dict] = None, *, status_code: int = 200):
    """Render a template with the CSRF token and keep the CSRF cookie fresh."""
    token = csrf.token_for(request)
    ctx = {"csrf_token": token}
    if context:
        ctx.update(context)
    response = get_templates(request).TemplateResponse(request, name, ctx, status_code=status_code)
    csrf.attach_token(response, token)
    return response
