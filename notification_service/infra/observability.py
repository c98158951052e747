"""Error-reporting and breadcrumb collaborator.

Services receive an ``Observability`` implementation instead of reaching for
a global reporting SDK. Implementations must never raise into the caller:
reporting is a side channel and cannot change control flow.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from opentelemetry import trace

logger = logging.getLogger(__name__)


@runtime_checkable
class Observability(Protocol):
    """Side channel for internal error detail and processing breadcrumbs."""

    def record_error(self, exc: BaseException, **context: Any) -> None:
        """Capture an exception that is about to be surfaced opaquely."""
        ...

    def add_breadcrumb(self, message: str, **data: Any) -> None:
        """Record a processing step for later correlation with errors."""
        ...


class TracingObservability:
    """Observability backed by logging and the current OpenTelemetry span.

    Breadcrumbs become span events and DEBUG log records; errors are attached
    to the active span (status set to ERROR) and noted at DEBUG without a
    traceback, which the raising code logs itself.
    Without a configured tracer provider the span calls are no-ops.
    """

    def __init__(self, logger_name: str = "notification_service.observability") -> None:
        self._logger = logging.getLogger(logger_name)

    def record_error(self, exc: BaseException, **context: Any) -> None:
        try:
            span = trace.get_current_span()
            span.record_exception(exc, attributes=_span_attributes(context))
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(exc)))
            # The raising service logs the traceback
            self._logger.debug(
                "Recorded internal error",
                extra={"error_type": type(exc).__name__, **context},
            )
        except Exception:
            logger.debug("Observability backend failed to record error", exc_info=True)

    def add_breadcrumb(self, message: str, **data: Any) -> None:
        try:
            trace.get_current_span().add_event(message, attributes=_span_attributes(data))
            self._logger.debug(message, extra={"breadcrumb": True, **data})
        except Exception:
            logger.debug("Observability backend failed to add breadcrumb", exc_info=True)


def _span_attributes(data: dict[str, Any]) -> dict[str, Any]:
    """Coerce values to OpenTelemetry-compatible attribute types."""
    attributes: dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (str, bool, int, float)):
            attributes[key] = value
        else:
            attributes[key] = str(value)
    return attributes
