"""Session helpers (issue tokens, cookies, validation)."""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request, Response

from storefront.core.config import get_settings
from storefront.domain.models import Session, User
from storefront.repositories.json_storage import FileRepository
from storefront.services.user_service import UserService

SESSION_COOKIE_NAME = "session"
MIN_SESSION_TTL_SECONDS = 60


def session_ttl_seconds() -> int:
    return max(MIN_SESSION_TTL_SECONDS, get_settings().session_ttl_seconds)


class SessionService:
    """Server-side sessions kept in their own JSON file."""

    def __init__(self, user_service: UserService, path: str) -> None:
        self.user_service = user_service
        self.repo: FileRepository[Session] = FileRepository(path, Session)

    def issue_session(self, user: User) -> str:
        token = secrets.token_urlsafe(32)
        ttl = session_ttl_seconds()
        now = datetime.now(timezone.utc)
        sessions = [s for s in self.repo.read_all() if not _expired(s, now)]
        sessions.append(Session(id=token, user_id=user.id, expires_at=now + timedelta(seconds=ttl)))
        self.repo.save_all(sessions)
        return token

    def get_user(self, token: Optional[str]) -> Optional[User]:
        if not token:
            return None
        now = datetime.now(timezone.utc)
        for session in self.repo.read_all():
            if session.id != token:
                continue
            if _expired(session, now):
                self.delete_session(token)
                return None
            return self.user_service.find_by_id(session.user_id)
        return None

    def current_user(self, request: Request) -> Optional[User]:
        """Return the user behind the session cookie, if any."""
        return self.get_user(request.cookies.get(SESSION_COOKIE_NAME))

    def delete_session(self, token: Optional[str]) -> None:
        if not token:
            return
        sessions = self.repo.read_all()
        remaining = [s for s in sessions if s.id != token]
        if len(remaining) != len(sessions):
            self.repo.save_all(remaining)

    def save_all(self) -> None:
        now = datetime.now(timezone.utc)
        self.repo.save_all([s for s in self.repo.read_all() if not _expired(s, now)])


def _expired(session: Session, now: datetime) -> bool:
    expires_at = session.expires_at
    if expires_at is None:
        return True
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at < now


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="strict",
        max_age=session_ttl_seconds(),
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
