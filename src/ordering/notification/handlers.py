"""Order notifications: tell customers when their order is placed or moves.

Runs after the order is committed. A failing notifier is logged and never
undoes the order.
"""

import structlog
from protean import handle

from ordering.domain import ordering
from ordering.notification import get_notifier
from ordering.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


def _deliver(kind, order_number, send):
    try:
        outcome = send(get_notifier())
    except Exception:
        logger.exception("Notifier raised", kind=kind, order_number=order_number)
        return None

    if outcome.get("status") not in ("sent", "queued"):
        logger.warning(
            "Notification not delivered",
            kind=kind,
            order_number=order_number,
            error=outcome.get("error"),
        )
    return outcome


@ordering.event_handler(part_of=Order)
class OrderNotificationHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        name = event.customer_name or ""
        _deliver(
            "confirmation",
            event.order_number,
            lambda notifier: notifier.send_order_confirmation(name, event.order_number, event.total),
        )
        _deliver(
            "status_update",
            event.order_number,
            lambda notifier: notifier.send_order_status_update(
                name, event.order_number, event.status, "Your order has been placed"
            ),
        )

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        message = event.note or f"Your order is now {event.new_status}"
        _deliver(
            "status_update",
            event.order_number,
            lambda notifier: notifier.send_order_status_update(
                event.customer_name or "", event.order_number, event.new_status, message
            ),
        )

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        message = f"Your order was cancelled: {event.reason}" if event.reason else "Your order was cancelled"
        _deliver(
            "status_update",
            event.order_number,
            lambda notifier: notifier.send_order_status_update(
                event.customer_name or "", event.order_number, "Cancelled", message
            ),
        )
