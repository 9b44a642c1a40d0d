"""Inventory ledger: check, reserve and release stock held on Products.

All stock movements of the ordering workflow go through here. Validation is
read-only and happens for every line before anything is written; commits
withdraw stock product by product inside the caller's unit of work.

Each save goes through the Product repository, which compares the version the
product was read at with the stored one. A product changed by another writer
in between fails the save with ``ExpectedVersionError`` instead of
overwriting the other writer's decrement.
"""

from collections import OrderedDict
from enum import Enum

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.catalogue.product import Product
from ordering.errors import InsufficientStock, InvalidQuantity, ProductNotFound

logger = structlog.get_logger(__name__)


class ReservationOutcome(Enum):
    OK = "ok"
    INSUFFICIENT_STOCK = "insufficient_stock"
    NOT_FOUND = "not_found"


def quantities_by_product(lines) -> "OrderedDict[str, int]":
    """Sum requested quantities per product, keeping first-seen order.

    `lines` is any iterable of objects exposing ``product_id`` and ``quantity``.
    """
    totals: OrderedDict[str, int] = OrderedDict()
    for line in lines:
        if line.quantity is None or line.quantity <= 0:
            raise InvalidQuantity(str(line.product_id), line.quantity)
        key = str(line.product_id)
        totals[key] = totals.get(key, 0) + line.quantity
    return totals


class InventoryLedger:
    def __init__(self, repository=None):
        self._repo = repository or current_domain.repository_for(Product)

    def load(self, product_id) -> Product | None:
        """Sellable product by id, or None when unknown or deactivated."""
        try:
            product = self._repo.get(str(product_id))
        except ObjectNotFoundError:
            return None
        return product if product.is_active else None

    def check(self, product_id, quantity) -> ReservationOutcome:
        product = self.load(product_id)
        if product is None:
            return ReservationOutcome.NOT_FOUND
        if not product.is_available(quantity):
            return ReservationOutcome.INSUFFICIENT_STOCK
        return ReservationOutcome.OK

    def validate_all(self, lines) -> dict[str, Product]:
        """Check every line against current stock without touching it.

        Returns the loaded products keyed by id. Raises ``ProductNotFound`` or
        ``InsufficientStock`` for the first line that cannot be served.
        """
        products = {}
        for product_id, quantity in quantities_by_product(lines).items():
            product = self.load(product_id)
            if product is None:
                raise ProductNotFound(product_id)
            if not product.is_available(quantity):
                raise InsufficientStock(product_id, quantity, product.stock_quantity or 0, name=product.name)
            products[product_id] = product
        return products

    def decrement(self, product, quantity) -> ReservationOutcome:
        """Withdraw `quantity` from an already loaded product and save it.

        A stale product (changed since it was loaded) is reported as
        ``INSUFFICIENT_STOCK``; nothing is written for it.
        """
        if not product.is_available(quantity):
            return ReservationOutcome.INSUFFICIENT_STOCK
        product.withdraw_stock(quantity)
        try:
            self._repo.add(product)
        except ExpectedVersionError:
            logger.warning(
                "Stock changed concurrently, decrement rejected",
                product_id=str(product.id),
                quantity=quantity,
            )
            return ReservationOutcome.INSUFFICIENT_STOCK
        return ReservationOutcome.OK

    def reserve(self, product_id, quantity) -> ReservationOutcome:
        if quantity is None or quantity <= 0:
            raise InvalidQuantity(str(product_id), quantity)
        product = self.load(product_id)
        if product is None:
            return ReservationOutcome.NOT_FOUND
        return self.decrement(product, quantity)

    def commit_all(self, lines, products=None) -> None:
        """Withdraw stock for every line within the current unit of work.

        `products` may carry the instances returned by ``validate_all`` so they
        are saved at the version they were validated at. A concurrent change
        surfaces as ``ExpectedVersionError`` and aborts the unit of work.
        """
        products = products or {}
        for product_id, quantity in quantities_by_product(lines).items():
            product = products.get(product_id) or self.load(product_id)
            if product is None:
                raise ProductNotFound(product_id)
            product.withdraw_stock(quantity)
            self._repo.add(product)
            logger.debug(
                "Stock withdrawn",
                product_id=product_id,
                quantity=quantity,
                remaining=product.stock_quantity,
            )

    def release(self, product_id, quantity, reason=None) -> None:
        """Put stock back for a product (compensation or cancellation)."""
        try:
            product = self._repo.get(str(product_id))
        except ObjectNotFoundError:
            logger.warning("Cannot release stock for unknown product", product_id=str(product_id))
            return
        product.restock(quantity, reason=reason)
        self._repo.add(product)
