"""
User accounts: authentication, self-registration and admin management.
"""

from __future__ import annotations

import logging
from typing import Optional

from storefront.core.security import hash_password, needs_rehash, verify_password
from storefront.domain.models import ROLE_USER, User, normalize_role
from storefront.services.crud_service import CrudService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class UserError(Exception):
    """Base class for user management errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UserExistsError(UserError):
    pass


class UserValidationError(UserError):
    pass


class UserService(CrudService[User]):
    entity_type = User

    def find_by_email(self, email: Optional[str]) -> Optional[User]:
        needle = (email or "").strip().lower()
        if not needle:
            return None
        for user in self.get_all():
            if (user.email or "").lower() == needle:
                return user
        return None

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self.find_by_email(email)
        if not user or not verify_password(password, user.password):
            return None
        if needs_rehash(user.password):
            user.password = hash_password(password)
            self.update(user)
            logger.info("Upgraded legacy password for %s", user.email)
        return user

    def _validate_credentials(self, email: str, password: str) -> str:
        clean_email = (email or "").strip()
        if not clean_email or "@" not in clean_email:
            raise UserValidationError("Email tidak valid")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise UserValidationError(f"Password minimal {MIN_PASSWORD_LENGTH} karakter")
        return clean_email

    def register_user(self, email: str, password: str) -> bool:
        """Create a USER account; False when the e-mail is already taken."""
        clean_email = self._validate_credentials(email, password)
        if self.find_by_email(clean_email) is not None:
            return False
        user = self.add(User(email=clean_email, password=hash_password(password), role=ROLE_USER))
        logger.info("Registered user %s", user.email)
        return True

    def create_user(self, email: str, password: str, role: str) -> User:
        clean_email = self._validate_credentials(email, password)
        try:
            role_value = normalize_role(role)
        except ValueError as exc:
            raise UserValidationError(str(exc)) from exc
        if self.find_by_email(clean_email) is not None:
            raise UserExistsError("Email sudah terdaftar")
        user = self.add(User(email=clean_email, password=hash_password(password), role=role_value))
        logger.info("Admin created user %s with role %s", user.email, user.role)
        return user

    def update_role(self, email: str, role: str) -> Optional[User]:
        try:
            role_value = normalize_role(role)
        except ValueError as exc:
            raise UserValidationError(str(exc)) from exc
        user = self.find_by_email(email)
        if user is None:
            return None
        user.role = role_value
        self.update(user)
        logger.info("Role of %s changed to %s", user.email, role_value)
        return user

    def delete_by_email(self, email: str) -> bool:
        user = self.find_by_email(email)
        if user is None:
            return False
        self.delete(user.id)
        logger.info("Deleted user %s", user.email)
        return True
