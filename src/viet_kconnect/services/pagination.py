"""Cursor and offset pagination for post listings.

A cursor is the URL-safe base64 (unpadded) encoding of
``{"createdAt": <ISO-8601>, "id": <post id>}`` taken from the last row of a
page. Keyset pagination walks ``(created_at, id)`` in descending order, so
rows inserted while a client pages through the feed never shift the pages
it has not read yet.
"""

from __future__ import annotations

import base64
import binascii
import json
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from viet_kconnect.core.settings import settings
from viet_kconnect.db.time import as_utc_naive

from .predicates import And, Eq, Lt, Or, Predicate

__all__ = [
    "MAX_PAGE",
    "Cursor",
    "PaginationPlan",
    "clamp_limit",
    "decode_cursor",
    "encode_cursor",
    "keyset_predicate",
    "parse_page",
    "select_pagination",
    "total_pages",
]

PaginationMode = Literal["cursor", "offset"]

# Keeps (page - 1) * limit inside a signed 64-bit OFFSET for any sane limit.
MAX_PAGE = 10**12


@dataclass(frozen=True)
class Cursor:
    created_at: datetime
    id: str


def encode_cursor(created_at: datetime, post_id: str) -> str:
    # Microsecond precision: the keyset compares against stored values exactly.
    timestamp = as_utc_naive(created_at).isoformat(timespec="microseconds") + "Z"
    payload = json.dumps({"createdAt": timestamp, "id": post_id})
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(token: str | None) -> Cursor | None:
    """Decode a cursor token, returning None for anything malformed."""
    if not token:
        return None
    padding = "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(token + padding)
        data = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None
    created_at = data.get("createdAt")
    post_id = data.get("id")
    if not isinstance(created_at, str) or not isinstance(post_id, str) or not post_id:
        return None
    try:
        parsed = as_utc_naive(datetime.fromisoformat(created_at))
    except (ValueError, OverflowError):
        return None
    return Cursor(created_at=parsed, id=post_id)


def keyset_predicate(cursor: Cursor) -> Predicate:
    """``created_at < c OR (created_at = c AND id < cid)``."""
    return Or(
        (
            Lt("created_at", cursor.created_at),
            And((Eq("created_at", cursor.created_at), Lt("id", cursor.id))),
        )
    )


def clamp_limit(
    raw: str | int | None,
    default: int | None = None,
    maximum: int | None = None,
) -> int:
    """Parse a page size, clamping it to ``[1, maximum]``.

    Missing or non-numeric values fall back to the default; zero and
    negative values clamp to 1.
    """
    default = settings.post_list_default_limit if default is None else default
    maximum = settings.post_list_max_limit if maximum is None else maximum
    try:
        value = int(raw) if raw is not None and raw != "" else default
    except (TypeError, ValueError):
        value = default
    return max(1, min(maximum, value))


def parse_page(raw: str | int | None) -> int:
    """Parse a 1-based page number, clamping it to ``[1, MAX_PAGE]``."""
    try:
        value = int(raw) if raw is not None and raw != "" else 1
    except (TypeError, ValueError):
        return 1
    return max(1, min(MAX_PAGE, value))


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


@dataclass(frozen=True)
class PaginationPlan:
    mode: PaginationMode
    page: int
    limit: int
    cursor: Cursor | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def select_pagination(
    *,
    cursor_token: str | None,
    page: int,
    limit: int,
    search_active: bool,
) -> PaginationPlan:
    """Use keyset pagination only for a valid cursor on a non-search listing.

    Search results are ordered by relevance, which has no stable keyset, so
    a search always pages by offset. An invalid cursor silently falls back
    to offset mode.
    """
    if cursor_token and not search_active:
        cursor = decode_cursor(cursor_token)
        if cursor is not None:
            return PaginationPlan(mode="cursor", page=1, limit=limit, cursor=cursor)
    return PaginationPlan(mode="offset", page=page, limit=limit)
