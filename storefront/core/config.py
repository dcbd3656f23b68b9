"""
Configuration helpers for the storefront.

Settings are read from environment variables once and cached, so that
routers/services never fetch os.environ directly. Tests clear the cache
with ``get_settings.cache_clear()`` after patching the environment.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: str
    users_file: str
    products_file: str
    transactions_file: str
    sessions_file: str
    session_ttl_seconds: int
    seed_default_data: bool
    log_level: str
    log_file: str
    login_rate_limit: int
    login_rate_window_seconds: int
    trust_forwarded_for: bool


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    data_dir = os.getenv("DATA_DIR") or "data"

    def _data_file(env_name: str, filename: str) -> str:
        return os.getenv(env_name) or os.path.join(data_dir, filename)

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=data_dir,
        users_file=_data_file("USERS_FILE", "users.json"),
        products_file=_data_file("PRODUCTS_FILE", "products.json"),
        transactions_file=_data_file("TRANSACTIONS_FILE", "transactions.json"),
        sessions_file=_data_file("SESSIONS_FILE", "sessions.json"),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400),
        seed_default_data=_bool(os.getenv("SEED_DEFAULT_DATA"), True),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_file=os.getenv("LOG_FILE", ""),
        login_rate_limit=_int(os.getenv("LOGIN_RATE_LIMIT", "10"), 10),
        login_rate_window_seconds=_int(os.getenv("LOGIN_RATE_WINDOW_SECONDS", "60"), 60),
        trust_forwarded_for=_bool(os.getenv("TRUST_FORWARDED_FOR"), False),
    )
