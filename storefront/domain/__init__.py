"""Domain records and helpers."""

from .models import (
    ROLE_ADMIN,
    ROLE_USER,
    Product,
    Session,
    Transaction,
    TransactionItem,
    User,
    normalize_role,
)

__all__ = [
    "ROLE_ADMIN",
    "ROLE_USER",
    "Product",
    "Session",
    "Transaction",
    "TransactionItem",
    "User",
    "normalize_role",
]
