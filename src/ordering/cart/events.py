"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Cart")
class CartLineAdded:
    """A product was put in the cart, either as a new line or merged into one."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)
    size = String(sanitize=False)
    color = String(sanitize=False)
    price = Float(required=True)
    added_at = DateTime(required=True)


@ordering.event(part_of="Cart")
class CartLineUpdated:
    """Quantity, size or color of a cart line changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    quantity = Integer(required=True)
    size = String(sanitize=False)
    color = String(sanitize=False)
    updated_at = DateTime(required=True)


@ordering.event(part_of="Cart")
class CartLineRemoved:
    """A line was taken out of the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    removed_at = DateTime(required=True)


@ordering.event(part_of="Cart")
class CartCleared:
    """Every line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    removed_count = Integer(required=True)
    cleared_at = DateTime(required=True)


@ordering.event(part_of="Cart")
class CartReconciled:
    """Lines charged against an order were removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    order_id = Identifier()
    removed_line_ids = Text(required=True, sanitize=False)  # JSON array
    reconciled_at = DateTime(required=True)
