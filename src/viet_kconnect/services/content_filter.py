"""Banned-word and spam screening for user-submitted text."""

from __future__ import annotations

import re

__all__ = ["has_prohibited_content"]

_BANNED_PATTERNS = [
    re.compile(r"씨발", re.IGNORECASE),
    re.compile(r"시발", re.IGNORECASE),
    re.compile(r"\bsex\b", re.IGNORECASE),
    re.compile(r"fuck", re.IGNORECASE),
    re.compile(r"shit", re.IGNORECASE),
    re.compile(r"đụ\s?m[aá]", re.IGNORECASE),
    re.compile(r"duma", re.IGNORECASE),
    re.compile(r"\bđm\b", re.IGNORECASE),
    re.compile(r"dm\s", re.IGNORECASE),
    re.compile(r"đụm", re.IGNORECASE),
    re.compile(r"địt", re.IGNORECASE),
]

# Links, e-mail addresses, phone numbers and agency advertising.
_SPAM_PATTERNS = [
    re.compile(r"https?://", re.IGNORECASE),
    re.compile(r"www\.", re.IGNORECASE),
    re.compile(r"\S+@\S+\.\S+", re.IGNORECASE),
    re.compile(r"\b\d{2,3}-\d{3,4}-\d{4}\b"),
    re.compile(r"\b\d{9,}\b"),
    re.compile(r"(무료\s?상담|할인|대행|브로커|알선|유학원|visa\s?agency)", re.IGNORECASE),
]

# Uploaded images and links back to the site itself are allowed.
_ALLOWED_URL_PATTERNS = [
    re.compile(r"https?://[^\"'\s]*supabase\.co/storage/v1/object/", re.IGNORECASE),
    re.compile(r"https?://[^\"'\s]*viet-?kconnect", re.IGNORECASE),
]
_URL_RE = re.compile(r"https?://[^\s\"']+", re.IGNORECASE)


def has_prohibited_content(text: str | None) -> bool:
    if not text:
        return False
    sanitized = text
    for url in _URL_RE.findall(text):
        if any(pattern.search(url) for pattern in _ALLOWED_URL_PATTERNS):
            sanitized = sanitized.replace(url, "", 1)
    return any(pattern.search(sanitized) for pattern in _BANNED_PATTERNS) or any(
        pattern.search(sanitized) for pattern in _SPAM_PATTERNS
    )
