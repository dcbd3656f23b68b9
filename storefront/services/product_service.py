"""Product catalogue: CRUD plus search and sort for the storefront."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from storefront.domain.models import Product
from storefront.services.crud_service import CrudService

logger = logging.getLogger(__name__)

SORT_OPTIONS = {
    "name_asc": "Nama (A-Z)",
    "name_desc": "Nama (Z-A)",
    "price_asc": "Harga terendah",
    "price_desc": "Harga tertinggi",
}


class ProductValidationError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProductService(CrudService[Product]):
    entity_type = Product

    def search_products(self, query: Optional[str]) -> list[Product]:
        """Case-insensitive substring match on the name; blank query returns everything."""
        if query is None or not query.strip():
            return self.get_all()
        needle = query.lower()
        return [p for p in self.get_all() if needle in (p.name or "").lower()]

    def sort_products(self, products: Sequence[Product], sort_by: Optional[str]) -> list[Product]:
        if sort_by == "name_asc":
            return sorted(products, key=lambda p: (p.name or "").lower())
        if sort_by == "name_desc":
            return sorted(products, key=lambda p: (p.name or "").lower(), reverse=True)
        if sort_by == "price_asc":
            return sorted(products, key=lambda p: p.price)
        if sort_by == "price_desc":
            return sorted(products, key=lambda p: p.price, reverse=True)
        return list(products)

    def _validated(self, name: str, price: int, stock: int) -> tuple[str, int, int]:
        clean_name = (name or "").strip()
        if not clean_name:
            raise ProductValidationError("Nama produk wajib diisi")
        if price < 0:
            raise ProductValidationError("Harga tidak boleh negatif")
        if stock < 0:
            raise ProductValidationError("Stok tidak boleh negatif")
        return clean_name, price, stock

    def create_product(self, name: str, price: int, stock: int) -> Product:
        clean_name, price, stock = self._validated(name, price, stock)
        product = self.add(Product(name=clean_name, price=price, stock=stock))
        logger.info("Product %s created (%s)", product.id, product.name)
        return product

    def update_product(self, product_id: str, name: str, price: int, stock: int) -> Optional[Product]:
        product = self.find_by_id(product_id)
        if product is None:
            return None
        clean_name, price, stock = self._validated(name, price, stock)
        product.name = clean_name
        product.price = price
        product.stock = stock
        self.update(product)
        logger.info("Product %s updated", product_id)
        return product

    def delete_product(self, product_id: str) -> None:
        self.delete(product_id)
        logger.info("Product %s deleted", product_id)
