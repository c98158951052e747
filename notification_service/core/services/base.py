"""Shared base for service objects."""

from __future__ import annotations

import logging

from notification_service.infra.logging import get_lazy_logger


class BaseService:
    """Gives each service a logger named after its module and class.

    ``self.logger`` is for INFO and above; ``self._lazy`` takes callables for
    DEBUG detail that is only built when DEBUG is enabled:

        self._lazy.debug(lambda: f"Mute cache hit: {key} -> {cached}")
    """

    def __init__(self) -> None:
        name = f"{type(self).__module__}.{type(self).__qualname__}"
        self.logger = logging.getLogger(name)
        self._lazy = get_lazy_logger(name)
