"""Page/limit validation and page-range policy for notification listings."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any, Generic, TypeVar

from notification_service.core.exceptions import InvalidArgumentException, NotFoundException

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Upper bound of the integer id columns
MAX_INT = 2**31 - 1


def parse_positive_int(value: Any, name: str, maximum: int = MAX_INT) -> int:
    """Coerce ``value`` to an integer between 1 and ``maximum``.

    Accepts ints and decimal digit strings (as found in paths and query
    strings). Booleans, floats such as ``NaN``, and anything non-numeric are
    rejected.

    Raises:
        InvalidArgumentException: If the value is not a positive integer
            or exceeds ``maximum``.
    """
    parsed: int | None = None
    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isdecimal():
        parsed = int(value.strip())

    if parsed is None or not 0 < parsed <= maximum:
        raise InvalidArgumentException(
            detail=f"Invalid {name}: {value!r}. Must be a positive integer no greater than {maximum}.",
            type=f"invalid-{name.replace('_', '-')}",
            extra={name: str(value)},
        )
    return parsed


@dataclass(frozen=True, slots=True)
class PageRequest:
    """Validated 1-based page number and page size."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def of(cls, page: Any = DEFAULT_PAGE, limit: Any = DEFAULT_LIMIT) -> PageRequest:
        """Build a request, rejecting non-positive values and limits above ``MAX_LIMIT``."""
        return cls(
            page=parse_positive_int(page, "page"),
            limit=parse_positive_int(limit, "limit", maximum=MAX_LIMIT),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    """One slice of a scoped listing plus the size of the whole listing."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` rows at ``limit`` per page."""
    return math.ceil(total / limit) if total > 0 else 0


def ensure_page_in_range(request: PageRequest, total: int) -> None:
    """Reject a page past the last one when there is anything to paginate.

    Raises:
        NotFoundException: If ``total > 0`` and the requested page is beyond
            ``ceil(total / limit)``.
    """
    last_page = total_pages(total, request.limit)
    if total > 0 and request.page > last_page:
        raise NotFoundException(
            detail=(
                f"Page {request.page} exceeds available pages. "
                f"Total pages: {last_page}"
            ),
            type="page-out-of-range",
            extra={"page": request.page, "total_pages": last_page},
        )
