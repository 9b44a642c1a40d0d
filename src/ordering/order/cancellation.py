"""Order cancellation — command and handler.

Cancelling puts every line's quantity back into stock in the same unit of
work as the status change.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.inventory.ledger import InventoryLedger
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(max_length=500, sanitize=False)


def restock_order_lines(order):
    ledger = InventoryLedger()
    for line in order.lines:
        ledger.release(line.product_id, line.quantity, reason=f"order {order.order_number} cancelled")


def cancel_and_restock(order, actor, reason=None):
    order.cancel(actor, reason=reason)
    restock_order_lines(order)
    logger.info(
        "Order cancelled",
        order_id=str(order.id),
        order_number=order.order_number,
        cancelled_by=str(actor),
    )


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_for(command.order_id, user_id=command.user_id)
        cancel_and_restock(order, actor=command.user_id, reason=command.reason)
        repo.add(order)
