"""
Throttling for the login and register forms.

Attempts are counted in a fixed window per ``scope:client`` key. Windows
that have run out are evicted on every hit, so the table only holds
clients seen during the last window.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)

TOO_MANY_ATTEMPTS = "Terlalu banyak percobaan. Coba lagi sebentar lagi."


@dataclass
class _Window:
    count: int
    resets_at: float


class AttemptLimiter:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    def hit(self, key: str, limit: int, window_seconds: int) -> bool:
        """Record one attempt for ``key``; False once it is over ``limit``."""
        now = self._clock()
        with self._lock:
            self._evict(now)
            window = self._windows.get(key)
            if window is None:
                window = self._windows[key] = _Window(0, now + window_seconds)
            window.count += 1
            return window.count <= limit

    def _evict(self, now: float) -> None:
        for key in [k for k, w in self._windows.items() if w.resets_at <= now]:
            del self._windows[key]

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)


_limiter = AttemptLimiter()


def client_address(request: Request, *, trust_forwarded_for: bool = False) -> str:
    # X-Forwarded-For is client-controlled unless a proxy in front rewrites it
    if trust_forwarded_for:
        forwarded = (request.headers.get("x-forwarded-for") or "").split(",")[0].strip()
        if forwarded:
            return forwarded
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(
    request: Request,
    scope: str,
    *,
    limit: int,
    window_seconds: int,
    trust_forwarded_for: bool = False,
) -> None:
    """Raise 429 when this client exceeded ``limit`` attempts in ``scope``; ``limit <= 0`` disables it."""
    if limit <= 0:
        return
    key = f"{scope}:{client_address(request, trust_forwarded_for=trust_forwarded_for)}"
    if not _limiter.hit(key, limit, window_seconds):
        logger.warning("Rate limit exceeded for %s", key)
        raise HTTPException(429, TOO_MANY_ATTEMPTS)


def reset_limits() -> None:
    _limiter.clear()
