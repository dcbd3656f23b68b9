from __future__ import annotations

import uuid

from storefront.domain.models import Product
from storefront.services.product_service import ProductService


def test_add_assigns_fresh_uuid_and_persists(product_service):
    product = product_service.add(Product(id="ignored", name="Nasi Goreng", price=15000, stock=10))

    assert product.id != "ignored"
    uuid.UUID(product.id)
    assert product_service.find_by_id(product.id) == product
    assert product_service.find_by_id("missing") is None


def test_update_replaces_matching_record(product_service):
    product = product_service.add(Product(name="Es Teh", price=5000, stock=30))
    product.stock = 12
    product_service.update(product)

    assert product_service.find_by_id(product.id).stock == 12
    assert len(product_service.get_all()) == 1


def test_update_with_unknown_id_leaves_data_unchanged(product_service):
    product_service.add(Product(name="Es Teh", price=5000, stock=30))
    product_service.update(Product(id="nope", name="Ghost", price=1, stock=1))

    assert [p.name for p in product_service.get_all()] == ["Es Teh"]


def test_delete_removes_only_that_id(product_service):
    keep = product_service.add(Product(name="Mie Goreng", price=12000, stock=15))
    drop = product_service.add(Product(name="Es Teh", price=5000, stock=30))

    product_service.delete(drop.id)

    assert product_service.get_all() == [keep]


def test_instances_on_same_file_share_state(data_dir, product_service):
    other = ProductService(str(data_dir / "products.json"))
    created = other.add(Product(name="Kopi", price=8000, stock=5))

    assert product_service.find_by_id(created.id) == created


def test_save_all_overwrites_file(product_service):
    product_service.add(Product(name="Es Teh", price=5000, stock=30))
    product_service.save_all([Product(id="p1", name="Kopi", price=8000, stock=5)])

    assert product_service.get_all() == [Product(id="p1", name="Kopi", price=8000, stock=5)]
