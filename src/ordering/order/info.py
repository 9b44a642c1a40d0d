"""Editing a pending order's shipping details and note."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class UpdateOrderInfo:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    shipping_info = Text(sanitize=False)  # JSON: subset of name, phone, address, city, district, note
    note = String(max_length=1000, sanitize=False)


@ordering.command_handler(part_of=Order)
class UpdateOrderInfoHandler:
    @handle(UpdateOrderInfo)
    def update_order_info(self, command):
        shipping_info = command.shipping_info
        if isinstance(shipping_info, str):
            shipping_info = json.loads(shipping_info)

        repo = current_domain.repository_for(Order)
        order = repo.get_for(command.order_id, user_id=command.user_id)
        order.update_info(command.user_id, shipping_info=shipping_info, note=command.note)
        repo.add(order)
