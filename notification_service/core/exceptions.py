"""Error kinds surfaced to API callers.

Each subclass of :class:`AppException` fixes the HTTP status and problem
title for one kind of failure; handlers in ``app.exception_handlers`` render
them as RFC 7807 problem details.
"""

from __future__ import annotations

from typing import Any, ClassVar


class AppException(Exception):
    """Base for client-visible errors.

    Attributes:
        status_code: HTTP status code rendered for this kind.
        title: Short summary of the problem type.
        detail: Human-readable explanation of this occurrence.
        type: Problem type identifier, e.g. ``"page-out-of-range"``.
        instance: Optional URI of this occurrence.
        extra: Extra members merged into the problem body for 4xx errors.

    Example:
        raise NotFoundException(
            "No notification setting found for event ID: 7",
            type="setting-not-found",
            extra={"event_id": 7},
        )
    """

    status_code: ClassVar[int] = 500
    title: ClassVar[str] = "Internal Server Error"
    default_type: ClassVar[str] = "about:blank"

    def __init__(
        self,
        detail: str,
        type: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.detail = detail
        self.type = type or self.default_type
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status_code}, type={self.type!r}, detail={self.detail!r})"


class InvalidArgumentException(AppException):
    """Malformed or out-of-range input such as a zero page or a non-numeric event id."""

    status_code = 400
    title = "Bad Request"
    default_type = "invalid-argument"


class NotFoundException(AppException):
    """A mute setting, an event for the tenant, or a page that does not exist."""

    status_code = 404
    title = "Not Found"
    default_type = "not-found"


class UnauthorizedException(AppException):
    """Missing or undecodable bearer token, or a token without a tenant."""

    status_code = 401
    title = "Unauthorized"
    default_type = "unauthorized"


class InternalServerException(AppException):
    """Opaque failure; the cause is only visible through observability and chaining."""

    default_type = "internal-error"
