"""Default accounts and catalogue written on first start."""
from __future__ import annotations

import logging

from storefront.core.security import hash_password
from storefront.domain.models import ROLE_ADMIN, ROLE_USER, Product, User
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService

logger = logging.getLogger(__name__)

DEFAULT_USERS = (
    ("admin@uas", "admin123", ROLE_ADMIN),
    ("user@uas", "user123", ROLE_USER),
)

DEFAULT_PRODUCTS = (
    ("Nasi Goreng", 15000, 10),
    ("Mie Goreng", 12000, 15),
    ("Es Teh", 5000, 30),
)


def seed_default_data(user_service: UserService, product_service: ProductService) -> None:
    """Fill empty users/products files; existing data is never touched."""
    if not user_service.get_all():
        for email, password, role in DEFAULT_USERS:
            user_service.add(User(email=email, password=hash_password(password), role=role))
        logger.info("Created default users")

    if not product_service.get_all():
        for name, price, stock in DEFAULT_PRODUCTS:
            product_service.add(Product(name=name, price=price, stock=stock))
        logger.info("Created default products")
