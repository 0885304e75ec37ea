# tests/api/test_responses.py
"""Tests for the response envelope helpers."""

import json

import pytest

from viet_kconnect.api.responses import (
    CACHE_NO_STORE,
    CACHE_PRIVATE_NO_STORE,
    cache_policy,
    error_response,
    paginated_response,
    success_response,
)


def _body(response):
    return json.loads(response.body)


class TestCachePolicy:
    """Only anonymous, unfiltered, unsearched listings are public."""

    def test_public(self):
        assert cache_policy(False, False, False) == (
            "public, s-maxage=60, stale-while-revalidate=300"
        )

    @pytest.mark.parametrize(
        "flags",
        [(True, False, False), (False, True, False), (False, False, True), (True, True, True)],
    )
    def test_private(self, flags):
        assert cache_policy(*flags) == CACHE_PRIVATE_NO_STORE


class TestEnvelopes:
    """Test envelope construction."""

    def test_success_with_message(self):
        response = success_response({"id": "1"}, "Saved", cache_control="private, no-store")
        assert _body(response) == {"success": True, "data": {"id": "1"}, "message": "Saved"}
        assert response.headers["cache-control"] == "private, no-store"

    def test_success_without_cache_header(self):
        response = success_response([])
        assert "cache-control" not in response.headers

    def test_error_is_never_cached(self):
        response = error_response("Nope", "VALIDATION_ERROR")
        assert response.status_code == 400
        assert response.headers["cache-control"] == CACHE_NO_STORE
        assert _body(response) == {"success": False, "error": "Nope", "code": "VALIDATION_ERROR"}

    def test_paginated(self):
        response = paginated_response([1, 2], page=2, limit=2, total=5, meta={"hasMore": True})
        assert _body(response) == {
            "success": True,
            "data": [1, 2],
            "pagination": {"page": 2, "limit": 2, "total": 5, "totalPages": 3},
            "meta": {"hasMore": True},
        }
