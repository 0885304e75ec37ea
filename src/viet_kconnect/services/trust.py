"""Trust badges and the trust-weighted popularity ranking."""

from __future__ import annotations

import calendar
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, TypeVar

from viet_kconnect.constants.badges import is_expert_badge_type
from viet_kconnect.db.time import as_utc_naive, utcnow

__all__ = [
    "COMMUNITY",
    "EXPERT",
    "OUTDATED",
    "VERIFIED",
    "Trust",
    "is_certified",
    "months_between",
    "popularity_score",
    "rank_popular",
    "resolve_trust",
]

OUTDATED_AFTER_MONTHS = 12


@dataclass(frozen=True)
class Trust:
    badge: str
    weight: float


OUTDATED = Trust("outdated", 0.5)
EXPERT = Trust("expert", 1.3)
VERIFIED = Trust("verified", 1.0)
COMMUNITY = Trust("community", 0.7)


def _add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def months_between(later: datetime, earlier: datetime) -> float:
    """Calendar months from ``earlier`` to ``later``, with a fractional part.

    The fraction is measured against the length of the month the remainder
    falls in, so 2024-01-15 to 2024-02-15 is exactly 1.0.
    """
    later = as_utc_naive(later)
    earlier = as_utc_naive(earlier)
    if later.day < earlier.day:
        return -months_between(earlier, later)
    whole = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    anchor = _add_months(earlier, whole)
    if later < anchor:
        neighbour = _add_months(earlier, whole - 1)
        fraction = (later - anchor) / (anchor - neighbour)
    else:
        neighbour = _add_months(earlier, whole + 1)
        fraction = (later - anchor) / (neighbour - anchor)
    return whole + fraction


def resolve_trust(author: Any, created_at: datetime, now: datetime | None = None) -> Trust:
    """Trust badge and weight for a post.

    Age wins over author status: content a year old or more is always
    ``outdated``. ``author`` may be None or any object exposing
    ``is_expert``, ``is_verified`` and ``badge_type``.
    """
    now = now or utcnow()
    if months_between(now, created_at) >= OUTDATED_AFTER_MONTHS:
        return OUTDATED
    badge_type = getattr(author, "badge_type", None)
    if getattr(author, "is_expert", False) or is_expert_badge_type(badge_type):
        return EXPERT
    if getattr(author, "is_verified", False) or badge_type:
        return VERIFIED
    return COMMUNITY


def is_certified(user: Any) -> bool:
    """A responder is certified by verification, expert status or any badge."""
    return bool(
        getattr(user, "is_verified", False)
        or getattr(user, "is_expert", False)
        or getattr(user, "badge_type", None)
    )


class RankablePost(Protocol):
    likes: int
    views: int
    answers_count: int
    post_comments_count: int
    trust_weight: float


RankableT = TypeVar("RankableT", bound=RankablePost)


def popularity_score(post: RankablePost) -> float:
    engagement = (
        (post.likes or 0) * 2
        + (post.views or 0)
        + (post.answers_count or 0) * 1.5
        + (post.post_comments_count or 0)
    )
    return engagement * post.trust_weight


def rank_popular(posts: Sequence[RankableT]) -> list[RankableT]:
    """Re-sort one page by trust-weighted engagement.

    ``sorted`` is stable with ``reverse=True``, so equal scores keep their
    incoming order.
    """
    return sorted(posts, key=popularity_score, reverse=True)
