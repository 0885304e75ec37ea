"""Attach per-viewer and aggregate fields to a page of post rows.

Every lookup here is one query for the whole page, keyed by the page's post
ids; nothing is fetched per post.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from viet_kconnect.db.time import utcnow
from viet_kconnect.models import Answer, Bookmark, Comment, Follow, Like, User
from viet_kconnect.schemas.post import PostAuthor, PostListItem

from .content import build_excerpt, extract_images
from .trust import is_certified, resolve_trust

logger = logging.getLogger(__name__)

__all__ = [
    "PageAggregates",
    "ResponderSplit",
    "count_answers",
    "count_top_level_comments",
    "decorate_posts",
    "get_following_id_set",
    "load_page_aggregates",
    "split_responders",
    "viewer_post_ids",
]


def count_answers(db: Session, post_ids: Sequence[str]) -> dict[str, int]:
    if not post_ids:
        return {}
    rows = db.execute(
        select(Answer.post_id, func.count(Answer.id))
        .where(Answer.post_id.in_(post_ids))
        .group_by(Answer.post_id)
    ).all()
    return {post_id: int(count) for post_id, count in rows}


def count_top_level_comments(db: Session, post_ids: Sequence[str]) -> dict[str, int]:
    """Count comments directly on each post; replies are not counted."""
    if not post_ids:
        return {}
    rows = db.execute(
        select(Comment.post_id, func.count(Comment.id))
        .where(Comment.post_id.in_(post_ids), Comment.parent_id.is_(None))
        .group_by(Comment.post_id)
    ).all()
    return {post_id: int(count) for post_id, count in rows}


def viewer_post_ids(
    db: Session,
    model: type[Like] | type[Bookmark],
    viewer_id: str | None,
    post_ids: Sequence[str],
) -> set[str]:
    """Ids of the posts on this page the viewer has liked or bookmarked."""
    if not viewer_id or not post_ids:
        return set()
    return set(
        db.scalars(
            select(model.post_id).where(model.user_id == viewer_id, model.post_id.in_(post_ids))
        ).all()
    )


def get_following_id_set(
    db: Session,
    follower_id: str | None,
    candidate_ids: Iterable[str | None],
) -> set[str]:
    """Which of ``candidate_ids`` the viewer follows; never includes the viewer."""
    if not follower_id:
        return set()
    unique_ids = {candidate for candidate in candidate_ids if candidate and candidate != follower_id}
    if not unique_ids:
        return set()
    return set(
        db.scalars(
            select(Follow.following_id).where(
                Follow.follower_id == follower_id,
                Follow.following_id.in_(unique_ids),
            )
        ).all()
    )


@dataclass
class ResponderSplit:
    certified: dict[str, set[str]] = field(default_factory=lambda: defaultdict(set))
    other: dict[str, set[str]] = field(default_factory=lambda: defaultdict(set))

    def add(self, post_id: str, author_id: str, certified: bool) -> None:
        # Certification belongs to the user, so a certified author never
        # stays in the post's "other" set.
        if certified:
            self.certified[post_id].add(author_id)
            self.other[post_id].discard(author_id)
        elif author_id not in self.certified[post_id]:
            self.other[post_id].add(author_id)

    def counts(self, post_id: str) -> tuple[int, int]:
        return len(self.certified.get(post_id, ())), len(self.other.get(post_id, ()))


def split_responders(db: Session, post_ids: Sequence[str]) -> ResponderSplit:
    """Split each post's answerers and commenters into certified and other."""
    split = ResponderSplit()
    if not post_ids:
        return split

    answer_pairs = db.execute(
        select(Answer.post_id, Answer.author_id)
        .where(Answer.post_id.in_(post_ids))
        .group_by(Answer.post_id, Answer.author_id)
    ).all()
    comment_pairs = db.execute(
        select(Comment.post_id, Comment.author_id)
        .where(Comment.post_id.in_(post_ids))
        .group_by(Comment.post_id, Comment.author_id)
    ).all()
    pairs = {(post_id, author_id) for post_id, author_id in [*answer_pairs, *comment_pairs]}
    responder_ids = {author_id for _, author_id in pairs}
    if not responder_ids:
        return split

    responders = db.execute(
        select(User.id, User.is_verified, User.is_expert, User.badge_type).where(
            User.id.in_(responder_ids)
        )
    ).all()
    certified_ids = {row.id for row in responders if is_certified(row)}

    for post_id, author_id in sorted(pairs):
        split.add(post_id, author_id, author_id in certified_ids)
    return split


@dataclass
class PageAggregates:
    answers: dict[str, int] = field(default_factory=dict)
    comments: dict[str, int] = field(default_factory=dict)
    liked: set[str] = field(default_factory=set)
    bookmarked: set[str] = field(default_factory=set)
    following: set[str] = field(default_factory=set)
    responders: ResponderSplit | None = None


def load_page_aggregates(
    db: Session,
    rows: Sequence[Any],
    viewer_id: str | None,
    *,
    include_responders: bool,
) -> PageAggregates:
    post_ids = [row.id for row in rows]
    return PageAggregates(
        answers=count_answers(db, post_ids),
        comments=count_top_level_comments(db, post_ids),
        liked=viewer_post_ids(db, Like, viewer_id, post_ids),
        bookmarked=viewer_post_ids(db, Bookmark, viewer_id, post_ids),
        following=get_following_id_set(db, viewer_id, (row.author_id for row in rows)),
        responders=split_responders(db, post_ids) if include_responders else None,
    )


def _author_of(row: Any, following: set[str]) -> PostAuthor | None:
    if row.author_user_id is None:
        return None
    return PostAuthor(
        id=row.author_user_id,
        name=row.author_name,
        display_name=row.author_display_name,
        image=row.author_image,
        is_verified=bool(row.author_is_verified),
        is_expert=bool(row.author_is_expert),
        badge_type=row.author_badge_type,
        is_following=row.author_user_id in following,
    )


def decorate_posts(
    db: Session,
    rows: Sequence[Any],
    viewer_id: str | None,
    *,
    include_responders: bool,
    now: datetime | None = None,
) -> list[PostListItem]:
    """Decorate raw listing rows, preserving their order.

    ``include_responders`` controls the certified/other responder split.
    Cursor-paginated pages skip it and their items omit both counts.
    """
    if not rows:
        return []
    now = now or utcnow()
    aggregates = load_page_aggregates(db, rows, viewer_id, include_responders=include_responders)

    items: list[PostListItem] = []
    for row in rows:
        author = _author_of(row, aggregates.following)
        trust = resolve_trust(author, row.created_at, now)
        content = row.content or ""
        images = extract_images(content)
        answers_count = aggregates.answers.get(row.id, 0)
        post_comments_count = aggregates.comments.get(row.id, 0)
        certified_count: int | None = None
        other_count: int | None = None
        if aggregates.responders is not None:
            certified_count, other_count = aggregates.responders.counts(row.id)

        items.append(
            PostListItem(
                id=row.id,
                author_id=row.author_id,
                type=row.type,
                title=row.title,
                content=content,
                excerpt=build_excerpt(content),
                category=row.category,
                subcategory=row.subcategory,
                tags=list(row.tags or []),
                views=row.views or 0,
                likes=row.likes or 0,
                likes_count=row.likes or 0,
                is_resolved=bool(row.is_resolved),
                adopted_answer_id=row.adopted_answer_id,
                created_at=row.created_at,
                updated_at=row.updated_at or row.created_at,
                author=author,
                trust_badge=trust.badge,
                trust_weight=trust.weight,
                thumbnail=images.thumbnail,
                thumbnails=images.thumbnails,
                image_count=images.image_count,
                is_liked=row.id in aggregates.liked,
                is_bookmarked=row.id in aggregates.bookmarked,
                answers_count=answers_count,
                post_comments_count=post_comments_count,
                comments_count=answers_count + post_comments_count,
                certified_responder_count=certified_count,
                other_responder_count=other_count,
            )
        )
    logger.debug("Decorated %d posts (responders=%s)", len(items), include_responders)
    return items
