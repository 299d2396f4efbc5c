"""
Structured JSON logging for the budget kernel.

Every record under the ``budget_kernel`` logger tree is rendered as one JSON
object per line: a fixed envelope (ts, level, logger, message), the fields
bound in ``LogContext`` for the current call, then the record's ``extra``.

``LogContext`` holds a single field, ``invocation_id``.  The engine tracer
binds a fresh id around each engine call, so every event the call emits
(window shares, fallbacks, the total, the trace itself) can be grouped.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from typing import Any, Iterator

_LOGGER_PREFIX = "budget_kernel"

_invocation_id: ContextVar[str | None] = ContextVar("log_invocation_id", default=None)


class LogContext:
    """Call-scoped log fields, safe across threads and asyncio tasks."""

    @staticmethod
    def get_all() -> dict[str, str]:
        invocation_id = _invocation_id.get()
        return {} if invocation_id is None else {"invocation_id": invocation_id}

    @staticmethod
    def clear() -> None:
        _invocation_id.set(None)

    @staticmethod
    @contextmanager
    def bind(invocation_id: str) -> Iterator[None]:
        """Set ``invocation_id`` for the block, restoring the outer value after."""
        token = _invocation_id.set(invocation_id)
        try:
            yield
        finally:
            _invocation_id.reset(token)


# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _to_json(obj: Any) -> Any:
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    # UUID, Decimal, Fraction and anything else exotic
    return str(obj)


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        payload.update(
            (key, val) for key, val in vars(record).items()
            if key not in _RESERVED and key not in payload
        )
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record))
        return json.dumps(payload, default=_to_json)

    def _exception_fields(self, record: logging.LogRecord) -> dict[str, Any]:
        exc = record.exc_info[1]
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        if hasattr(exc, "code"):
            fields["exc_code"] = exc.code
        # BudgetKernelError subclasses keep their context as public attributes
        fields.update(
            (f"exc_{key}", val) for key, val in vars(exc).items()
            if not key.startswith("_")
        )
        fields["traceback"] = self.formatException(record.exc_info)
        return fields


def get_logger(name: str) -> logging.Logger:
    """Logger under the budget_kernel namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach a JSON handler to the budget_kernel logger.  Later calls are no-ops."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root = logging.getLogger(_LOGGER_PREFIX)
    root.setLevel(level)
    root.propagate = False
    handler = handler or logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)


def reset_logging() -> None:
    """Undo configure_logging.  For tests."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(_LOGGER_PREFIX)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
