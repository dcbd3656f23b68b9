import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.core.config import get_settings
from storefront.core.logging_config import setup_logging
from storefront.routers import admin as admin_router
from storefront.routers import auth as auth_router
from storefront.routers import user as user_router
from storefront.services.product_service import ProductService
from storefront.services.seed import seed_default_data
from storefront.services.session_service import SessionService
from storefront.services.transaction_service import TransactionService
from storefront.services.user_service import UserService

BASE = os.path.dirname(__file__)
WEB = os.path.join(BASE, "web")
TEMPLATES = os.path.join(BASE, "templates")

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; img-src 'self' data:; style-src 'self' 'unsafe-inline'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "same-origin")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def rupiah(value) -> str:
    """15000 -> 'Rp 15.000'."""
    try:
        amount = round(float(value or 0))
    except (TypeError, ValueError):
        amount = 0
    return "Rp " + f"{amount:,}".replace(",", ".")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.settings.seed_default_data:
        seed_default_data(app.state.user_service, app.state.product_service)
    logger.info("Storefront ready (data dir: %s)", os.path.abspath(app.state.settings.data_dir))
    yield


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn; each call reads the current settings."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title="UAS PBO Storefront", lifespan=lifespan)
    app.state.settings = settings

    templates = Jinja2Templates(directory=TEMPLATES)
    templates.env.filters["rupiah"] = rupiah
    app.state.templates = templates

    user_service = UserService(settings.users_file)
    product_service = ProductService(settings.products_file)
    app.state.user_service = user_service
    app.state.product_service = product_service
    app.state.transaction_service = TransactionService(product_service, settings.transactions_file)
    app.state.session_service = SessionService(user_service, settings.sessions_file)

    app.mount("/static", StaticFiles(directory=WEB), name="static")
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.include_router(auth_router.router)
    app.include_router(user_router.router)
    app.include_router(admin_router.router)
    return app


app = create_app()
