"""Administrative status updates — command and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.cancellation import cancel_and_restock
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    note = String(max_length=1000, sanitize=False)
    changed_by = String(required=True, max_length=255, sanitize=False)
    force = Boolean(default=False)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_for(command.order_id)

        force = bool(command.force)
        target = OrderStatus.parse(command.status)
        cancelling = target == OrderStatus.CANCELLED and not force
        if cancelling and order.is_cancellable:
            cancel_and_restock(order, actor=command.changed_by, reason=command.note)
        else:
            order.update_status(command.status, actor=command.changed_by, note=command.note, force=force)
            if force:
                logger.warning(
                    "Order status forced",
                    order_id=str(order.id),
                    status=order.status,
                    changed_by=command.changed_by,
                )

        repo.add(order)
