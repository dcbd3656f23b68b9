from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the storefront package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storefront.core import config as core_config  # noqa: E402
from storefront.core.rate_limiter import reset_limits  # noqa: E402
from storefront.services.product_service import ProductService  # noqa: E402
from storefront.services.session_service import SessionService  # noqa: E402
from storefront.services.transaction_service import TransactionService  # noqa: E402
from storefront.services.user_service import UserService  # noqa: E402


@pytest.fixture()
def data_dir(tmp_path, monkeypatch):
    """Point every data file at a temporary directory and reset cached settings."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    for name in ("USERS_FILE", "PRODUCTS_FILE", "TRANSACTIONS_FILE", "SESSIONS_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("LOGIN_RATE_LIMIT", "1000")
    core_config.get_settings.cache_clear()
    reset_limits()
    yield tmp_path
    core_config.get_settings.cache_clear()
    reset_limits()


@pytest.fixture()
def user_service(data_dir) -> UserService:
    return UserService(str(data_dir / "users.json"))


@pytest.fixture()
def product_service(data_dir) -> ProductService:
    return ProductService(str(data_dir / "products.json"))


@pytest.fixture()
def transaction_service(data_dir, product_service) -> TransactionService:
    return TransactionService(product_service, str(data_dir / "transactions.json"))


@pytest.fixture()
def session_service(data_dir, user_service) -> SessionService:
    return SessionService(user_service, str(data_dir / "sessions.json"))
