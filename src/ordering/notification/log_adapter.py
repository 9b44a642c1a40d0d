"""Notifier that only writes structured log lines."""

from uuid import uuid4

import structlog

from ordering.notification.port import NotifierPort

logger = structlog.get_logger(__name__)


class LogNotifier(NotifierPort):
    def send_order_confirmation(self, name, order_number, total):
        message_id = f"log-{uuid4().hex[:12]}"
        logger.info("Order confirmation", message_id=message_id, name=name, order_number=order_number, total=total)
        return {"message_id": message_id, "status": "sent"}

    def send_order_status_update(self, name, order_number, status, message):
        message_id = f"log-{uuid4().hex[:12]}"
        logger.info(
            "Order status update",
            message_id=message_id,
            name=name,
            order_number=order_number,
            status=status,
            message=message,
        )
        return {"message_id": message_id, "status": "sent"}
