"""
Plain records persisted in the JSON data files.

Keys are camelCase on disk (``userId``, ``productName``) so that existing
data files keep loading; attributes are snake_case in Python.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

ROLE_ADMIN = "ADMIN"
ROLE_USER = "USER"
ROLES = (ROLE_ADMIN, ROLE_USER)


def normalize_role(value: str | None) -> str:
    """Upper-case a role name; raise ValueError for anything unknown."""
    role = (value or "").strip().upper()
    if role not in ROLES:
        raise ValueError(f"Role tidak dikenal: {value!r}")
    return role


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept ISO strings and the ``[y, m, d, H, M, S, ns]`` array form."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        if isinstance(value, (list, tuple)):
            parts = [int(p) for p in value] + [0] * (7 - len(value))
            year, month, day, hour, minute, second, nanos = parts[:7]
            return datetime(year, month, day, hour, minute, second, nanos // 1000)
        return datetime.fromisoformat(str(value))
    except (TypeError, ValueError, OverflowError):
        return None


@dataclass
class User:
    id: str = ""
    email: str = ""
    password: str = ""
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return (self.role or "").upper() == ROLE_ADMIN

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        return cls(
            id=_str(data.get("id")),
            email=_str(data.get("email")),
            password=_str(data.get("password")),
            role=_str(data.get("role")).upper() or ROLE_USER,
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "email": self.email, "password": self.password, "role": self.role}


@dataclass
class Product:
    id: str = ""
    name: str = ""
    price: int = 0
    stock: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Product":
        return cls(
            id=_str(data.get("id")),
            name=_str(data.get("name")),
            price=_int(data.get("price")),
            stock=_int(data.get("stock")),
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "price": self.price, "stock": self.stock}


@dataclass
class TransactionItem:
    product_id: str = ""
    product_name: str = ""
    qty: int = 0
    price: int = 0

    @property
    def subtotal(self) -> int:
        return self.qty * self.price

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TransactionItem":
        return cls(
            product_id=_str(data.get("productId")),
            product_name=_str(data.get("productName")),
            qty=_int(data.get("qty")),
            price=_int(data.get("price")),
        )

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "qty": self.qty,
            "price": self.price,
        }


@dataclass
class Transaction:
    id: str = ""
    user_id: str = ""
    items: list[TransactionItem] = field(default_factory=list)
    timestamp: Optional[datetime] = None
    total: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Transaction":
        return cls(
            id=_str(data.get("id")),
            user_id=_str(data.get("userId")),
            items=[TransactionItem.from_dict(it) for it in (data.get("items") or []) if isinstance(it, Mapping)],
            timestamp=parse_timestamp(data.get("timestamp")),
            total=_int(data.get("total")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "items": [it.to_dict() for it in self.items],
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "total": self.total,
        }


@dataclass
class Session:
    """Server-side login session; ``id`` is the cookie token."""

    id: str = ""
    user_id: str = ""
    expires_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Session":
        return cls(
            id=_str(data.get("id")),
            user_id=_str(data.get("userId")),
            expires_at=parse_timestamp(data.get("expiresAt")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "expiresAt": self.expires_at.isoformat() if self.expires_at else None,
        }
