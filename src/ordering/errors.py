"""Failures raised by the ordering workflow.

Every error carries a stable ``code`` so callers can branch on it and the API
can map it to an HTTP status. Validation failures are raised before anything
is written; ``InternalError`` is the only one that may follow a partial write
and is kept apart from the rest so operators can reconcile.
"""


class OrderingError(Exception):
    """Base exception for all ordering errors."""

    code = "ordering_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class EmptyOrder(OrderingError):
    code = "empty_order"

    def __init__(self, message: str = "Order has no items"):
        super().__init__(message)


class InvalidQuantity(OrderingError):
    code = "invalid_quantity"

    def __init__(self, product_id: str, quantity):
        self.product_id = product_id
        self.quantity = quantity
        super().__init__(f"Quantity for product {product_id} must be positive, got {quantity}")


class ProductNotFound(OrderingError):
    code = "product_not_found"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class InsufficientStock(OrderingError):
    code = "insufficient_stock"

    def __init__(self, product_id: str, requested: int, available: int | None = None, name: str | None = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        label = name or product_id
        msg = f"Product {label} is out of stock"
        if available is not None:
            msg = f"{msg}: {available} available, {requested} requested"
        super().__init__(msg)


class InvalidShippingInfo(OrderingError):
    code = "invalid_shipping_info"

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Shipping info is missing: {', '.join(missing)}")


class InvalidPaymentMethod(OrderingError):
    code = "invalid_payment_method"

    def __init__(self, payment_method):
        self.payment_method = payment_method
        super().__init__(f"Unsupported payment method: {payment_method}")


class AccessDenied(OrderingError):
    code = "access_denied"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class OrderNotFound(OrderingError):
    code = "order_not_found"

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class CartItemNotFound(OrderingError):
    code = "cart_item_not_found"

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Cart item {item_id} not found")


class OrderNotCancellable(OrderingError):
    code = "order_not_cancellable"

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Order cannot be cancelled at this stage ({status})")


class OrderNotEditable(OrderingError):
    code = "order_not_editable"

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Order can only be edited while Pending ({status})")


class InvalidStatusTransition(OrderingError):
    code = "invalid_status_transition"

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition from {current} to {target}")


class InternalError(OrderingError):
    """Storage or unexpected failure; the request may need reconciliation."""

    code = "internal_error"


class InvalidRequest(OrderingError):
    """Malformed input caught by field validation (missing or badly typed values)."""

    code = "invalid_request"

    def __init__(self, messages: dict):
        self.messages = messages
        details = "; ".join(f"{field}: {', '.join(map(str, errs))}" for field, errs in messages.items())
        super().__init__(f"Invalid request: {details}" if details else "Invalid request")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "fields": self.messages}


class PromotionNotFound(OrderingError):
    code = "promotion_not_found"

    def __init__(self, promotion_id: str):
        self.promotion_id = promotion_id
        super().__init__(f"Promotion {promotion_id} not found")
