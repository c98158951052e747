"""Context management for structured logging.

Context is stored in a ContextVar so each asyncio task (one HTTP request,
one consumed message) sees its own fields without explicit passing.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        ```python
        set_log_context(tenant_id=1, event_id=2)
        logger.info("Notification created")  # record carries tenant_id, event_id
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Clear all logging context for the current task.

    The worker calls this between messages so fields never leak from one
    delivery to the next.
    """
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Logging filter that copies the log context onto every LogRecord.

    configure_logging() attaches it to the QueueHandler, which runs in the
    task that emitted the record. Existing record attributes are never overwritten.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
