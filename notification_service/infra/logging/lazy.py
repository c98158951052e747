"""Deferred message building for DEBUG logging."""

from __future__ import annotations

import logging
from typing import Any


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Adapter that calls callable messages and args only if the level is enabled.

    Example:
        ```python
        logger = get_lazy_logger(__name__)
        logger.debug(lambda: f"Channel backlog: {channel.qsize()}")
        ```
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        if callable(msg):
            msg = msg()
        args = tuple(arg() if callable(arg) else arg for arg in args)
        super().log(level, msg, *args, **kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Return a :class:`LazyLoggerAdapter` over ``logging.getLogger(name)``."""
    return LazyLoggerAdapter(logging.getLogger(name), context)
