"""Cart aggregate — one per user, holding the lines they intend to buy.

The cart is created lazily on first access and never deleted, only emptied.
Lines are keyed by (product, size, color): adding the same key again merges
quantities. Totals are derived from the lines and recomputed on every change
with the same charges policy that orders use.
"""

import json
from datetime import UTC, datetime

from protean import atomic_change
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.cart.events import (
    CartCleared,
    CartLineAdded,
    CartLineRemoved,
    CartLineUpdated,
    CartReconciled,
)
from ordering.domain import ordering
from ordering.errors import CartItemNotFound, InsufficientStock, InvalidQuantity, ProductNotFound
from ordering.policy import compute_charges


def line_key(product_id, size=None, color=None):
    """Identity of a cart line: the same product in the same variant."""
    return (str(product_id), size or "", color or "")


@ordering.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    size = String(max_length=50, sanitize=False)
    color = String(max_length=50, sanitize=False)
    price = Float(required=True, min_value=0.0)  # unit price when added
    created_at = DateTime()
    updated_at = DateTime()

    @property
    def key(self):
        return line_key(self.product_id, self.size, self.color)

    @property
    def total_price(self):
        return (self.price or 0.0) * self.quantity


@ordering.aggregate
class Cart:
    user_id = Identifier(required=True)
    lines = HasMany(CartLine)
    total_items = Integer(default=0)
    subtotal = Float(default=0.0)
    shipping = Float(default=0.0)
    tax = Float(default=0.0)
    total = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=str(user_id), created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def recompute_totals(self):
        lines = list(self.lines or [])
        subtotal = sum(line.total_price for line in lines)
        charges = compute_charges(subtotal, has_items=bool(lines))
        self.total_items = sum(line.quantity for line in lines)
        self.subtotal = charges.subtotal
        self.shipping = charges.shipping
        self.tax = charges.tax
        self.total = charges.total

    def summary(self) -> dict:
        return {
            "total_items": self.total_items or 0,
            "subtotal": self.subtotal or 0.0,
            "shipping": self.shipping or 0.0,
            "tax": self.tax or 0.0,
            "total": self.total or 0.0,
        }

    def find_line(self, line_id):
        line = next((ln for ln in self.lines or [] if str(ln.id) == str(line_id)), None)
        if line is None:
            raise CartItemNotFound(str(line_id))
        return line

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_line(self, product, quantity, size=None, color=None):
        """Put `quantity` of `product` in the cart, merging with a matching line."""
        if quantity is None or quantity <= 0:
            raise InvalidQuantity(str(product.id), quantity)
        if not product.is_active:
            raise ProductNotFound(str(product.id))

        key = line_key(product.id, size, color)
        existing = next((ln for ln in self.lines or [] if ln.key == key), None)
        requested = quantity + (existing.quantity if existing else 0)
        if not product.is_available(requested):
            raise InsufficientStock(str(product.id), requested, product.stock_quantity or 0, name=product.name)

        now = datetime.now(UTC)
        with atomic_change(self):
            if existing:
                existing.quantity = requested
                existing.updated_at = now
                line = existing
            else:
                line = CartLine(
                    product_id=str(product.id),
                    quantity=quantity,
                    size=size,
                    color=color,
                    price=product.price,
                    created_at=now,
                    updated_at=now,
                )
                self.add_lines(line)
            self.recompute_totals()
            self.updated_at = now

        self.raise_(
            CartLineAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                line_id=str(line.id),
                product_id=str(product.id),
                quantity=quantity,
                line_quantity=line.quantity,
                size=size,
                color=color,
                price=line.price,
                added_at=now,
            )
        )
        return line

    def update_line(self, line_id, quantity=None, size=None, color=None):
        """Change a line; a quantity of zero or less removes it.

        When a new size or color makes the line match another one, the two
        are merged into the other line, as `add_line` does.

        Returns the updated line, or None when it was removed.
        """
        line = self.find_line(line_id)
        if quantity is not None and quantity <= 0:
            self.remove_line(line_id)
            return None

        key = line_key(line.product_id, size or line.size, color or line.color)
        twin = next((ln for ln in self.lines or [] if ln.key == key and ln.id != line.id), None)

        now = datetime.now(UTC)
        with atomic_change(self):
            new_quantity = quantity if quantity is not None else line.quantity
            if twin:
                twin.quantity += new_quantity
                twin.updated_at = now
                self.remove_lines(line)
                merged_away, line = line, twin
            else:
                merged_away = None
                line.quantity = new_quantity
                if size:
                    line.size = size
                if color:
                    line.color = color
                line.updated_at = now
            self.recompute_totals()
            self.updated_at = now

        if merged_away:
            self.raise_(
                CartLineRemoved(
                    cart_id=str(self.id),
                    line_id=str(merged_away.id),
                    product_id=str(merged_away.product_id),
                    removed_at=now,
                )
            )
        self.raise_(
            CartLineUpdated(
                cart_id=str(self.id),
                line_id=str(line.id),
                quantity=line.quantity,
                size=line.size,
                color=line.color,
                updated_at=now,
            )
        )
        return line

    def remove_line(self, line_id):
        line = self.find_line(line_id)
        now = datetime.now(UTC)
        with atomic_change(self):
            self.remove_lines(line)
            self.recompute_totals()
            self.updated_at = now

        self.raise_(
            CartLineRemoved(
                cart_id=str(self.id),
                line_id=str(line.id),
                product_id=str(line.product_id),
                removed_at=now,
            )
        )

    def clear(self):
        lines = list(self.lines or [])
        now = datetime.now(UTC)
        with atomic_change(self):
            for line in lines:
                self.remove_lines(line)
            self.recompute_totals()
            self.updated_at = now

        self.raise_(CartCleared(cart_id=str(self.id), removed_count=len(lines), cleared_at=now))

    def remove_lines_matching(self, keys, order_id=None):
        """Drop every line whose (product, size, color) is in `keys`.

        Used after an order is placed so that nothing charged on the order
        stays in the cart. Returns the removed line ids.
        """
        keys = {line_key(*key) for key in keys}
        matched = [line for line in self.lines or [] if line.key in keys]
        if not matched:
            return []

        now = datetime.now(UTC)
        with atomic_change(self):
            for line in matched:
                self.remove_lines(line)
            self.recompute_totals()
            self.updated_at = now

        removed = [str(line.id) for line in matched]
        self.raise_(
            CartReconciled(
                cart_id=str(self.id),
                order_id=str(order_id) if order_id else None,
                removed_line_ids=json.dumps(removed),
                reconciled_at=now,
            )
        )
        return removed
