"""Domain events for the Order aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """An order was created, stock withdrawn and the cart reconciled."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    customer_name = String(sanitize=False)
    status = String(required=True)
    subtotal = Float(required=True)
    shipping = Float(required=True)
    tax = Float(required=True)
    total = Float(required=True)
    payment_method = String(required=True)
    line_count = Integer(required=True)
    lines = Text(required=True, sanitize=False)  # JSON: [{product_id, quantity, price}, ...]
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """An order was cancelled before it shipped."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    customer_name = String(sanitize=False)
    previous_status = String(required=True)
    reason = String(sanitize=False)
    cancelled_by = String(required=True, sanitize=False)
    lines = Text(required=True, sanitize=False)  # JSON: [{product_id, quantity}, ...]
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An order moved to a new status (forced moves included)."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    customer_name = String(sanitize=False)
    previous_status = String(required=True)
    new_status = String(required=True)
    note = String(sanitize=False)
    changed_by = String(required=True, sanitize=False)
    forced = Boolean(default=False)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderInfoUpdated:
    """Shipping details or the note of a pending order were edited."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    changed_by = String(required=True, sanitize=False)
    shipping_info = Text(sanitize=False)  # JSON of the new shipping info, when changed
    note = String(sanitize=False)
    updated_at = DateTime(required=True)
