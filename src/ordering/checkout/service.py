"""Ordering service, the entry point the HTTP layer and scripts call.

Each method runs one operation and returns an ``OperationResult``. Order
placement is retried when a concurrent writer changed a product or the day's
order-number counter between validation and save.
"""

import json

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from ordering.checkout.placement import PlaceOrder
from ordering.errors import InternalError
from ordering.order.cancellation import CancelOrder
from ordering.order.info import UpdateOrderInfo
from ordering.order.queries import get_order, get_tracking, list_orders, order_to_dict
from ordering.order.status import UpdateOrderStatus
from ordering.results import OperationResult, run_operation

logger = structlog.get_logger(__name__)

MAX_PLACEMENT_ATTEMPTS = 3


def _place(command):
    for attempt in range(1, MAX_PLACEMENT_ATTEMPTS + 1):
        try:
            return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError:
            logger.warning(
                "Concurrent update while placing order, retrying",
                user_id=str(command.user_id),
                attempt=attempt,
            )
    raise InternalError("Order could not be placed because of concurrent updates, please retry")


class OrderService:
    def create_order(self, user_id, items, shipping_info, payment_method, note=None, payment_id=None, now=None):
        """Place an order for explicit line items (dicts with product_id, quantity, size, color)."""

        def op():
            order_id = _place(
                PlaceOrder(
                    user_id=user_id,
                    lines=json.dumps(list(items or [])),
                    shipping_info=json.dumps(shipping_info or {}),
                    payment_method=payment_method,
                    payment_id=payment_id,
                    note=note,
                    placed_at=now,
                )
            )
            return order_to_dict(get_order(order_id))

        return run_operation("Order creation", op, "Order created successfully", user_id=str(user_id))

    def checkout_cart(self, user_id, shipping_info, payment_method, note=None, payment_id=None, now=None):
        """Place an order for everything in the user's cart."""

        def op():
            order_id = _place(
                PlaceOrder(
                    user_id=user_id,
                    from_cart=True,
                    shipping_info=json.dumps(shipping_info or {}),
                    payment_method=payment_method,
                    payment_id=payment_id,
                    note=note,
                    placed_at=now,
                )
            )
            return order_to_dict(get_order(order_id))

        return run_operation("Checkout", op, "Order created successfully", user_id=str(user_id))

    def cancel_order(self, order_id, user_id, reason=None) -> OperationResult:
        def op():
            current_domain.process(
                CancelOrder(order_id=order_id, user_id=user_id, reason=reason),
                asynchronous=False,
            )
            return True

        return run_operation("Order cancellation", op, "Order cancelled successfully", order_id=str(order_id))

    def update_order_status(self, order_id, status, changed_by, note=None, force=False) -> OperationResult:
        def op():
            current_domain.process(
                UpdateOrderStatus(order_id=order_id, status=status, note=note, changed_by=changed_by, force=force),
                asynchronous=False,
            )
            return order_to_dict(get_order(order_id))

        return run_operation(
            "Order status update", op, "Order status updated successfully", order_id=str(order_id), status=status
        )

    def update_order_info(self, order_id, user_id, shipping_info=None, note=None) -> OperationResult:
        def op():
            current_domain.process(
                UpdateOrderInfo(
                    order_id=order_id,
                    user_id=user_id,
                    shipping_info=json.dumps(shipping_info) if shipping_info else None,
                    note=note,
                ),
                asynchronous=False,
            )
            return order_to_dict(get_order(order_id))

        return run_operation("Order info update", op, "Order information updated successfully", order_id=str(order_id))

    def get_order(self, order_id, user_id=None) -> OperationResult:
        return run_operation(
            "Order lookup",
            lambda: order_to_dict(get_order(order_id, user_id=user_id)),
            "Order retrieved successfully",
            order_id=str(order_id),
        )

    def list_orders(self, user_id, status=None, date_from=None, date_to=None) -> OperationResult:
        return run_operation(
            "Order listing",
            lambda: [order_to_dict(o) for o in list_orders(user_id, status, date_from, date_to)],
            "Orders retrieved successfully",
            user_id=str(user_id),
        )

    def get_tracking(self, order_id, user_id=None) -> OperationResult:
        return run_operation(
            "Tracking lookup",
            lambda: get_tracking(order_id, user_id=user_id),
            "Tracking information retrieved successfully",
            order_id=str(order_id),
        )
