"""Tests for opaque pagination cursors."""

import pytest

from src.bugtracker.schemas.pagination import PaginatedResponse, decode_cursor, encode_cursor

pytestmark = pytest.mark.unit


def test_cursor_is_url_safe():
    cursor = encode_cursor("2026-10-19T08:30:00.123456")

    assert decode_cursor(cursor) == "2026-10-19T08:30:00.123456"
    assert "/" not in cursor and "+" not in cursor


def test_invalid_cursor_raises_value_error():
    with pytest.raises(ValueError, match="Invalid cursor"):
        decode_cursor("%%%not-base64%%%")


def test_paginated_response_defaults():
    page = PaginatedResponse[int](items=[3, 2, 1])

    assert page.next_cursor is None
    assert page.has_more is False
