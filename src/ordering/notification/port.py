"""Port through which the ordering workflow tells customers about their orders."""

from abc import ABC, abstractmethod


class NotifierPort(ABC):
    """Abstract interface for customer notification adapters."""

    @abstractmethod
    def send_order_confirmation(self, name: str, order_number: str, total: float) -> dict:
        """Tell the customer their order was received.

        Returns:
            dict with keys: message_id, status ("sent", "queued" or "failed"),
            error (optional). "queued" means delivery continues in the background.
        """
        ...

    @abstractmethod
    def send_order_status_update(self, name: str, order_number: str, status: str, message: str) -> dict:
        """Tell the customer their order moved to `status`."""
        ...

    def close(self) -> None:
        """Release whatever the adapter holds; queued messages are flushed first."""
