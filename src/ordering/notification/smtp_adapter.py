"""SMTP notifier sending plain-text order emails through aiosmtplib.

Messages are handed to a background event loop and sent from there, so the
request that placed or moved an order never waits on the mail server. The
send methods report ``queued``; the outcome of the delivery itself is logged.

Configured from the environment:
    SMTP_HOST, SMTP_PORT (587), SMTP_USERNAME, SMTP_PASSWORD,
    SMTP_USE_TLS ("true"), SMTP_TIMEOUT (10), SMTP_SENDER, NOTIFIER_RECIPIENT

Without NOTIFIER_RECIPIENT the customer's name is used as the recipient
address, which only makes sense when names are email addresses.
"""

import asyncio
import os
import threading
from concurrent import futures
from email.message import EmailMessage
from email.utils import formatdate, make_msgid

import aiosmtplib
import structlog

from ordering.notification.port import NotifierPort

logger = structlog.get_logger(__name__)


class SmtpNotifier(NotifierPort):
    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool | None = None,
        sender: str | None = None,
        recipient: str | None = None,
        timeout: float | None = None,
    ):
        self.host = host or os.getenv("SMTP_HOST", "localhost")
        self.port = port or int(os.getenv("SMTP_PORT", "587"))
        self.username = username or os.getenv("SMTP_USERNAME")
        self.password = password or os.getenv("SMTP_PASSWORD")
        if use_tls is None:
            use_tls = os.getenv("SMTP_USE_TLS", "true").lower() in ("1", "true", "yes")
        self.use_tls = use_tls
        self.sender = sender or os.getenv("SMTP_SENDER", "orders@localhost")
        self.recipient = recipient or os.getenv("NOTIFIER_RECIPIENT")
        self.timeout = timeout or float(os.getenv("SMTP_TIMEOUT", "10"))

        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending: set[futures.Future] = set()

    # -------------------------------------------------------------------
    # Delivery
    # -------------------------------------------------------------------
    def build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message["Date"] = formatdate(localtime=False)
        message["Message-ID"] = make_msgid(domain=self.sender.rpartition("@")[2] or None)
        message.set_content(body)
        return message

    async def deliver(self, message: EmailMessage) -> dict:
        """Send one message and report how it went. Never raises for SMTP failures."""
        message_id = message["Message-ID"]
        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password if self.username else None,
                start_tls=self.use_tls,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error(
                "SMTP delivery failed",
                message_id=message_id,
                to=message["To"],
                subject=message["Subject"],
                error=str(exc),
            )
            return {"message_id": message_id, "status": "failed", "error": str(exc)}

        logger.info("SMTP delivery accepted", message_id=message_id, to=message["To"], subject=message["Subject"])
        return {"message_id": message_id, "status": "sent"}

    def _delivery_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None:
                self._loop = asyncio.new_event_loop()
                threading.Thread(
                    target=self._run_loop, args=(self._loop,), name="smtp-notifier", daemon=True
                ).start()
            return self._loop

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        loop.run_forever()
        loop.close()

    def _forget(self, future: futures.Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _send(self, to: str, subject: str, body: str) -> dict:
        message = self.build_message(to, subject, body)
        future = asyncio.run_coroutine_threadsafe(self.deliver(message), self._delivery_loop())
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return {"message_id": message["Message-ID"], "status": "queued"}

    def close(self, timeout: float = 10.0) -> None:
        """Wait for queued messages, then stop the delivery loop."""
        with self._lock:
            loop, pending = self._loop, list(self._pending)
            self._loop = None
        if loop is None:
            return

        _, not_done = futures.wait(pending, timeout=timeout)
        if not_done:
            logger.warning("SMTP notifier closed with undelivered messages", undelivered=len(not_done))
        loop.call_soon_threadsafe(loop.stop)

    # -------------------------------------------------------------------
    # NotifierPort
    # -------------------------------------------------------------------
    def send_order_confirmation(self, name, order_number, total):
        body = (
            f"Hello {name},\n\n"
            f"We have received your order {order_number}.\n"
            f"Total: {total:,.0f}\n\n"
            "We will let you know as soon as it moves."
        )
        return self._send(self.recipient or name, f"Order {order_number} confirmed", body)

    def send_order_status_update(self, name, order_number, status, message):
        body = f"Hello {name},\n\nYour order {order_number} is now {status}.\n\n{message}"
        return self._send(self.recipient or name, f"Order {order_number}: {status}", body)
