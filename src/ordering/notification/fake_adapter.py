"""Fake notifier that records messages in memory for test assertions."""

from uuid import uuid4

from ordering.notification.port import NotifierPort


class FakeNotifier(NotifierPort):
    def __init__(self):
        self.sent: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification delivery failed"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def _record(self, kind: str, **payload) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"notif-{uuid4().hex[:12]}"
        self.sent.append({"message_id": message_id, "kind": kind, **payload})
        return {"message_id": message_id, "status": "sent"}

    def send_order_confirmation(self, name, order_number, total):
        return self._record("confirmation", name=name, order_number=order_number, total=total)

    def send_order_status_update(self, name, order_number, status, message):
        return self._record("status_update", name=name, order_number=order_number, status=status, message=message)

    def messages_for(self, order_number) -> list[dict]:
        return [m for m in self.sent if m["order_number"] == order_number]

    def reset(self):
        """Clear recorded messages (useful between tests)."""
        self.sent.clear()
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
