"""Service-level helpers for creating posts and building the trending list."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from viet_kconnect.core.errors import AccountRestrictedError, ProhibitedContentError, ValidationError
from viet_kconnect.db.time import as_utc_naive, utcnow
from viet_kconnect.models import Post, User
from viet_kconnect.schemas.post import PostAuthor, PostCreate, PostResponse, TrendingPost

from .content_filter import has_prohibited_content

logger = logging.getLogger(__name__)

TRENDING_PERIOD_DAYS = {"day": 1, "week": 7, "month": 30}
DEFAULT_TRENDING_PERIOD = "week"

__all__ = [
    "DEFAULT_TRENDING_PERIOD",
    "TRENDING_PERIOD_DAYS",
    "create_post",
    "ensure_account_active",
    "list_trending",
    "to_post_response",
]


def ensure_account_active(db: Session, user: User, now: datetime | None = None) -> None:
    """Reject banned members and members inside a suspension window.

    A suspension whose end has passed is lifted on the spot.

    Raises:
        AccountRestrictedError: If the member may not write.
    """
    if user.status == "banned":
        raise AccountRestrictedError("Your account has been permanently banned")
    if user.status != "suspended":
        return
    if user.suspended_until is None:
        raise AccountRestrictedError("Your account is suspended")

    now = now or utcnow()
    suspended_until = as_utc_naive(user.suspended_until)
    if now < suspended_until:
        raise AccountRestrictedError(
            f"Your account is suspended until {suspended_until.date().isoformat()}"
        )
    user.status = None
    user.suspended_until = None
    db.flush()
    logger.info("Lifted expired suspension for user %s", user.id)


def create_post(db: Session, author: User, payload: PostCreate) -> Post:
    """Validate and persist a new post.

    Raises:
        ValidationError: If a required field is blank.
        ProhibitedContentError: If title or content fail the content filter.
        AccountRestrictedError: If the author is banned or suspended.
    """
    ensure_account_active(db, author)

    if not payload.title or not payload.content or not payload.category:
        raise ValidationError()
    if has_prohibited_content(f"{payload.title} {payload.content}"):
        raise ProhibitedContentError()

    post = Post(
        author_id=author.id,
        type=payload.type,
        title=payload.title,
        content=payload.content,
        category=payload.category,
        subcategory=payload.subcategory,
        tags=payload.tags,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("User %s created %s post %s", author.id, post.type, post.id)
    return post


def _author_payload(user: User | None) -> PostAuthor | None:
    if user is None:
        return None
    return PostAuthor.model_validate(user)


def to_post_response(post: Post, author: User | None) -> PostResponse:
    """Convert a Post ORM instance to an API schema."""
    return PostResponse(
        id=post.id,
        author_id=post.author_id,
        type=post.type,
        title=post.title,
        content=post.content,
        category=post.category,
        subcategory=post.subcategory,
        tags=list(post.tags or []),
        views=post.views,
        likes=post.likes,
        is_resolved=post.is_resolved,
        adopted_answer_id=post.adopted_answer_id,
        created_at=post.created_at,
        updated_at=post.updated_at,
        author=_author_payload(author),
    )


def list_trending(
    db: Session,
    *,
    limit: int,
    period: str = DEFAULT_TRENDING_PERIOD,
    now: datetime | None = None,
) -> list[TrendingPost]:
    """Popular posts of the period, nudged up by their author's trust score."""
    days = TRENDING_PERIOD_DAYS.get(period, TRENDING_PERIOD_DAYS[DEFAULT_TRENDING_PERIOD])
    since = (now or utcnow()) - timedelta(days=days)

    rows = db.execute(
        select(Post, User)
        .outerjoin(User, User.id == Post.author_id)
        .where(Post.created_at >= since)
        .order_by((Post.likes * 2 + Post.views).desc(), Post.created_at.desc(), Post.id.desc())
        .limit(limit)
    ).all()

    def score(row: tuple[Post, User | None]) -> float:
        post, author = row
        trust_score = author.trust_score if author is not None else 0
        return (post.likes or 0) * 2 + (post.views or 0) + (trust_score or 0) * 2

    ranked = sorted(rows, key=score, reverse=True)
    return [
        TrendingPost(
            id=post.id,
            author_id=post.author_id,
            type=post.type,
            title=post.title,
            category=post.category,
            subcategory=post.subcategory,
            views=post.views,
            likes=post.likes,
            created_at=post.created_at,
            updated_at=post.updated_at,
            author=_author_payload(author),
        )
        for post, author in ranked
    ]
