"""Product aggregate — catalogue reference data carrying the stock level.

Stock quantity never goes below zero and the in-stock flag always mirrors it.
The Inventory Ledger is the only writer of stock during order placement.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from ordering.catalogue.events import ProductAdded, StockRestored, StockWithdrawn
from ordering.domain import ordering
from ordering.errors import InsufficientStock, InvalidQuantity


@ordering.aggregate
class Product:
    name = String(required=True, max_length=255, sanitize=False)
    description = Text(sanitize=False)
    price = Float(required=True, min_value=0.0)
    original_price = Float(min_value=0.0)
    image = String(max_length=1000, sanitize=False)
    category_id = Identifier()
    stock_quantity = Integer(default=0, min_value=0)
    in_stock = Boolean(default=False)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def in_stock_flag_must_follow_quantity(self):
        if bool(self.in_stock) != ((self.stock_quantity or 0) > 0):
            raise ValidationError({"in_stock": ["In-stock flag must match the stock quantity"]})

    @classmethod
    def create(
        cls,
        name,
        price,
        stock_quantity=0,
        original_price=None,
        description=None,
        image=None,
        category_id=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            price=price,
            original_price=original_price if original_price is not None else price,
            description=description,
            image=image,
            category_id=category_id,
            stock_quantity=stock_quantity,
            in_stock=stock_quantity > 0,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=name,
                price=price,
                stock_quantity=stock_quantity,
                added_at=now,
            )
        )
        return product

    def is_available(self, quantity):
        """True when the product is sellable and holds at least `quantity` units."""
        return bool(self.is_active) and bool(self.in_stock) and (self.stock_quantity or 0) >= quantity

    def withdraw_stock(self, quantity):
        """Take `quantity` units out of stock; never lets the level go negative."""
        if quantity is None or quantity <= 0:
            raise InvalidQuantity(str(self.id), quantity)

        previous = self.stock_quantity or 0
        if quantity > previous:
            raise InsufficientStock(str(self.id), quantity, previous, name=self.name)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.stock_quantity = previous - quantity
            self.in_stock = self.stock_quantity > 0
            self.updated_at = now

        self.raise_(
            StockWithdrawn(
                product_id=str(self.id),
                quantity=quantity,
                previous_quantity=previous,
                new_quantity=self.stock_quantity,
                withdrawn_at=now,
            )
        )

    def restock(self, quantity, reason=None):
        """Put `quantity` units back into stock."""
        if quantity is None or quantity <= 0:
            raise InvalidQuantity(str(self.id), quantity)

        previous = self.stock_quantity or 0
        now = datetime.now(UTC)
        with atomic_change(self):
            self.stock_quantity = previous + quantity
            self.in_stock = True
            self.updated_at = now

        self.raise_(
            StockRestored(
                product_id=str(self.id),
                quantity=quantity,
                previous_quantity=previous,
                new_quantity=self.stock_quantity,
                reason=reason,
                restored_at=now,
            )
        )
