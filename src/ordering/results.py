"""Uniform result shape for ordering operations.

Callers of the ordering services never see exceptions: every call returns an
``OperationResult`` carrying either the data or the error. Known failures
keep their own code; anything unexpected is logged with its traceback and
reported as ``InternalError``.
"""

from dataclasses import dataclass
from typing import Any

import structlog
from protean.exceptions import ValidationError

from ordering.errors import InternalError, InvalidRequest, OrderingError

logger = structlog.get_logger(__name__)


@dataclass
class OperationResult:
    success: bool
    message: str
    data: Any = None
    error: OrderingError | None = None

    @classmethod
    def ok(cls, data=None, message="OK"):
        return cls(success=True, message=message, data=data)

    @classmethod
    def failure(cls, error: OrderingError):
        return cls(success=False, message=error.message, error=error)

    @property
    def error_code(self) -> str | None:
        return self.error.code if self.error else None

    def to_dict(self) -> dict:
        body = {"success": self.success, "message": self.message}
        if self.success:
            body["data"] = self.data
        else:
            body["error"] = self.error.to_dict()
        return body


def run_operation(action: str, fn, success_message: str, **context) -> OperationResult:
    """Run `fn` and fold its outcome into an OperationResult.

    `action` and `context` only feed the log lines.
    """
    try:
        data = fn()
    except OrderingError as exc:
        logger.info(f"{action} rejected", code=exc.code, reason=exc.message, **context)
        return OperationResult.failure(exc)
    except ValidationError as exc:
        logger.info(f"{action} rejected", code=InvalidRequest.code, reason=str(exc.messages), **context)
        return OperationResult.failure(InvalidRequest(exc.messages))
    except Exception:
        logger.exception(f"{action} failed", **context)
        return OperationResult.failure(InternalError(f"{action} failed, please try again later"))
    return OperationResult.ok(data, message=success_message)
