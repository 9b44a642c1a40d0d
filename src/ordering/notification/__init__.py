"""Notifier factory.

Provides get_notifier() / set_notifier() to swap implementations, chosen by
NOTIFIER_ADAPTER:
- "fake" (default) records messages for development and testing
- "log" writes structured log lines only
- "smtp" sends plain-text emails in the background
"""

import os

from ordering.notification.port import NotifierPort

_current_notifier: NotifierPort | None = None


def _build_from_env() -> NotifierPort:
    adapter = os.getenv("NOTIFIER_ADAPTER", "fake").lower()
    if adapter == "fake":
        from ordering.notification.fake_adapter import FakeNotifier

        return FakeNotifier()
    if adapter == "log":
        from ordering.notification.log_adapter import LogNotifier

        return LogNotifier()
    if adapter == "smtp":
        from ordering.notification.smtp_adapter import SmtpNotifier

        return SmtpNotifier()
    raise ValueError(f"Unknown notifier adapter: {adapter}")


def get_notifier() -> NotifierPort:
    """Return the current notifier, building it from the environment on first use."""
    global _current_notifier
    if _current_notifier is None:
        _current_notifier = _build_from_env()
    return _current_notifier


def set_notifier(notifier: NotifierPort) -> None:
    """Override the active notifier (useful for tests)."""
    global _current_notifier
    _current_notifier = notifier


def reset_notifier() -> None:
    """Close the current notifier and fall back to the environment-selected one."""
    global _current_notifier
    if _current_notifier is not None:
        _current_notifier.close()
    _current_notifier = None
