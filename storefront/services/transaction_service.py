"""
Checkout, order history and revenue reports.

Transactions snapshot the product name and unit price at checkout time so
later catalogue edits do not rewrite history.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Sequence

from storefront.domain.models import Transaction, TransactionItem
from storefront.repositories.json_storage import FileRepository
from storefront.services.product_service import ProductService

logger = logging.getLogger(__name__)


class EmptyCheckoutError(Exception):
    """Raised when a checkout form selects no purchasable item."""


class TransactionService:
    def __init__(self, product_service: ProductService, path: str) -> None:
        self.product_service = product_service
        self.repo: FileRepository[Transaction] = FileRepository(path, Transaction)

    def get_all(self) -> list[Transaction]:
        return self.repo.read_all()

    def get_by_user_id(self, user_id: str) -> list[Transaction]:
        return [t for t in self.repo.read_all() if t.user_id == user_id]

    def save_all(self, transactions: Sequence[Transaction]) -> None:
        self.repo.save_all(list(transactions))

    def create_transaction(self, transaction: Transaction) -> Transaction:
        """Decrement stock for every item, then append the transaction."""
        for item in transaction.items:
            product = self.product_service.find_by_id(item.product_id)
            if product is None:
                continue
            product.stock = max(0, product.stock - item.qty)
            self.product_service.update(product)
        transaction.id = str(uuid.uuid4())
        transaction.timestamp = datetime.now()
        items = self.repo.read_all()
        items.append(transaction)
        self.repo.save_all(items)
        return transaction

    def checkout(self, user_id: str, product_ids: Sequence[str], qtys: Sequence[int]) -> Transaction:
        items: list[TransactionItem] = []
        total = 0
        for product_id, qty in zip(product_ids, qtys):
            if qty <= 0:
                continue
            product = self.product_service.find_by_id(product_id)
            if product is None:
                continue
            items.append(TransactionItem(product_id=product.id, product_name=product.name, qty=qty, price=product.price))
            total += product.price * qty
        if not items:
            raise EmptyCheckoutError("Tidak ada item yang dipilih")
        transaction = self.create_transaction(Transaction(user_id=user_id, items=items, total=total))
        logger.info("User %s checked out %s item(s), total %s", user_id, len(items), total)
        return transaction

    # -------------------------------------- reports --------------------------------------
    def total_revenue(self) -> int:
        return sum(t.total for t in self.repo.read_all())

    def total_orders(self) -> int:
        return len(self.repo.read_all())

    def average_order(self) -> float:
        transactions = self.repo.read_all()
        if not transactions:
            return 0
        return sum(t.total for t in transactions) / len(transactions)

    def highest_order(self) -> int:
        return max((t.total for t in self.repo.read_all()), default=0)

    def spending_by_user(self) -> dict[str, tuple[int, int]]:
        """Map user id to (number of orders, total spent)."""
        summary: dict[str, tuple[int, int]] = {}
        for t in self.repo.read_all():
            orders, spent = summary.get(t.user_id, (0, 0))
            summary[t.user_id] = (orders + 1, spent + t.total)
        return summary
