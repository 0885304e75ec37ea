# tests/services/test_content_filter.py
"""Tests for banned-word and spam screening."""

import pytest

from viet_kconnect.services.content_filter import has_prohibited_content


@pytest.mark.parametrize(
    "text",
    [
        "what the fuck",
        "Visit https://spam.example.com now",
        "www.example.com",
        "mail me at agent@example.com",
        "call 010-1234-5678",
        "무료 상담 available",
        "best visa agency in Seoul",
    ],
)
def test_prohibited(text):
    assert has_prohibited_content(text) is True


@pytest.mark.parametrize(
    "text",
    [
        "",
        None,
        "How do I extend my D-2 visa?",
        '<img src="https://abc.supabase.co/storage/v1/object/public/images/a.png">',
        "See https://viet-kconnect.com/posts/123 for details",
    ],
)
def test_allowed(text):
    assert has_prohibited_content(text) is False
