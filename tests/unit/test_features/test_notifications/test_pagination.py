"""Unit tests for page validation and page-range policy."""

from __future__ import annotations

import pytest

from notification_service.core.exceptions import InvalidArgumentException, NotFoundException
from notification_service.features.notifications.pagination import (
    MAX_INT,
    MAX_LIMIT,
    Page,
    PageRequest,
    ensure_page_in_range,
    parse_positive_int,
    total_pages,
)


class TestParsePositiveInt:
    @pytest.mark.parametrize(("value", "expected"), [(1, 1), (42, 42), ("7", 7), (" 3 ", 3)])
    def test_accepts_positive_integers(self, value, expected):
        assert parse_positive_int(value, "page") == expected

    @pytest.mark.parametrize("value", [0, -1, "0", "-2", "NaN", "1.5", "", "ten", 2.0, True, None])
    def test_rejects_everything_else(self, value):
        with pytest.raises(InvalidArgumentException) as exc_info:
            parse_positive_int(value, "limit")

        assert exc_info.value.status_code == 400
        assert exc_info.value.type == "invalid-limit"

    def test_rejects_values_above_the_integer_column_range(self):
        assert parse_positive_int(str(MAX_INT), "event_id") == MAX_INT

        with pytest.raises(InvalidArgumentException) as exc_info:
            parse_positive_int(str(MAX_INT + 1), "event_id")

        assert exc_info.value.type == "invalid-event-id"


class TestPageRequest:
    def test_defaults(self):
        request = PageRequest.of()

        assert (request.page, request.limit, request.offset) == (1, 10, 0)

    def test_offset(self):
        assert PageRequest.of(page=3, limit=20).offset == 40

    def test_zero_page_is_invalid(self):
        with pytest.raises(InvalidArgumentException):
            PageRequest.of(page=0, limit=10)

    def test_zero_limit_is_invalid(self):
        with pytest.raises(InvalidArgumentException):
            PageRequest.of(page=1, limit=0)

    def test_limit_is_capped(self):
        assert PageRequest.of(page=1, limit=MAX_LIMIT).limit == MAX_LIMIT

        with pytest.raises(InvalidArgumentException) as exc_info:
            PageRequest.of(page=1, limit=str(10**30))

        assert exc_info.value.type == "invalid-limit"


class TestPageRange:
    @pytest.mark.parametrize(
        ("total", "limit", "expected"),
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (5, 1, 5)],
    )
    def test_total_pages(self, total, limit, expected):
        assert total_pages(total, limit) == expected

    def test_last_page_is_in_range(self):
        ensure_page_in_range(PageRequest(page=2, limit=10), total=11)

    def test_page_past_last_raises_not_found(self):
        with pytest.raises(NotFoundException) as exc_info:
            ensure_page_in_range(PageRequest(page=2, limit=10), total=5)

        assert "exceeds available pages" in exc_info.value.detail
        assert exc_info.value.extra == {"page": 2, "total_pages": 1}

    def test_empty_listing_never_out_of_range(self):
        ensure_page_in_range(PageRequest(page=7, limit=10), total=0)

    def test_page_total_pages(self):
        assert Page(items=[], total=25, page=1, limit=10).total_pages == 3
