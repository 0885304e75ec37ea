"""Post listing pipeline behind ``GET /api/posts``.

The pipeline runs in fixed order:

1. validate the search term and build category/type/search predicates;
2. resolve the viewer-scoped ``filter`` (may short-circuit to an empty page);
3. choose cursor or offset pagination;
4. count and fetch the page, falling back to popular questions when a
   search matches nothing;
5. decorate the rows with aggregates and content summaries;
6. re-rank the page by trust-weighted popularity for ``sort=popular``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import reduce
from operator import add
from typing import Any

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from viet_kconnect.core.settings import settings
from viet_kconnect.models import POST_TYPE_QUESTION, Post, User
from viet_kconnect.schemas.common import ListMeta
from viet_kconnect.schemas.post import PostListItem

from .pagination import (
    PaginationPlan,
    encode_cursor,
    keyset_predicate,
    select_pagination,
    total_pages,
)
from .post_decorator import decorate_posts
from .post_filters import SearchQuery, build_post_filters, parse_search
from .predicates import Eq, Predicate, TextMatch, compile_predicate, compile_predicates
from .scope import resolve_scope
from .trust import rank_popular

logger = logging.getLogger(__name__)

__all__ = [
    "FALLBACK_REASON_NO_MATCHES",
    "PostListQuery",
    "PostListResult",
    "list_posts",
    "post_list_columns",
]

SORT_POPULAR = "popular"
SORT_LATEST = "latest"
FALLBACK_REASON_NO_MATCHES = "no_matches"


@dataclass(frozen=True)
class PostListQuery:
    """Parsed query parameters of a listing request."""

    parent_category: str | None = None
    category: str | None = None
    search: str | None = None
    page: int = 1
    limit: int = 20
    post_type: str | None = None
    sort: str = SORT_LATEST
    filter: str | None = None
    cursor: str | None = None
    include_content: bool = False


@dataclass
class PostListResult:
    posts: list[PostListItem] = field(default_factory=list)
    page: int = 1
    limit: int = 20
    total: int = 0
    has_more: bool = False
    next_cursor: str | None = None
    pagination_mode: str = "offset"
    fallback_query: SearchQuery | None = None

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)

    @property
    def is_fallback(self) -> bool:
        return self.fallback_query is not None

    def meta(self) -> ListMeta:
        meta = ListMeta(
            next_cursor=self.next_cursor,
            has_more=self.has_more,
            pagination_mode=self.pagination_mode,
        )
        if self.fallback_query is not None:
            meta.is_fallback = True
            meta.reason = FALLBACK_REASON_NO_MATCHES
            meta.query = self.fallback_query.raw
            meta.tokens = list(self.fallback_query.tokens)
        return meta


def post_list_columns(preview_limit: int | None) -> list[Any]:
    """Columns for listing rows; ``content`` is cut in SQL unless unlimited."""
    content = Post.content
    if preview_limit is not None:
        content = func.substr(Post.content, 1, preview_limit)
    return [
        Post.id,
        Post.author_id,
        Post.type,
        Post.title,
        content.label("content"),
        Post.category,
        Post.subcategory,
        Post.tags,
        Post.views,
        Post.likes,
        Post.is_resolved,
        Post.adopted_answer_id,
        Post.created_at,
        Post.updated_at,
        User.id.label("author_user_id"),
        User.name.label("author_name"),
        User.display_name.label("author_display_name"),
        User.image.label("author_image"),
        User.is_verified.label("author_is_verified"),
        User.is_expert.label("author_is_expert"),
        User.badge_type.label("author_badge_type"),
    ]


def _latest_ordering() -> list[Any]:
    return [Post.created_at.desc(), Post.id.desc()]


def _popular_ordering() -> list[Any]:
    return [Post.likes.desc(), Post.views.desc(), Post.created_at.desc(), Post.id.desc()]


def _search_ordering(search: SearchQuery) -> list[Any]:
    """Relevance first, then questions, resolution, engagement and recency."""
    matches = [
        case((compile_predicate(TextMatch(("title", "content"), term)), 1), else_=0)
        for term in search.terms
    ]
    overlap = reduce(add, matches)
    is_question = case((Post.type == POST_TYPE_QUESTION, 1), else_=0)
    return [
        overlap.desc(),
        is_question.desc(),
        Post.is_resolved.desc(),
        Post.likes.desc(),
        Post.views.desc(),
        Post.created_at.desc(),
        Post.id.desc(),
    ]


@dataclass
class _Page:
    rows: list[Any]
    total: int
    has_more: bool


def _fetch_page(
    db: Session,
    predicates: list[Predicate],
    plan: PaginationPlan,
    order_by: list[Any],
    preview_limit: int | None,
) -> _Page:
    conditions = compile_predicates(predicates)
    stmt = (
        select(*post_list_columns(preview_limit))
        .outerjoin(User, User.id == Post.author_id)
        .where(*conditions)
        .order_by(*order_by)
    )

    if plan.mode == "cursor" and plan.cursor is not None:
        # One extra row tells us whether another page exists without a count.
        stmt = stmt.where(compile_predicate(keyset_predicate(plan.cursor)))
        rows = list(db.execute(stmt.limit(plan.limit + 1)).all())
        has_more = len(rows) > plan.limit
        return _Page(rows=rows[: plan.limit], total=0, has_more=has_more)

    total = db.scalar(select(func.count()).select_from(Post).where(*conditions)) or 0
    rows = list(db.execute(stmt.offset(plan.offset).limit(plan.limit)).all())
    return _Page(rows=rows, total=int(total), has_more=plan.page * plan.limit < total)


def list_posts(
    db: Session,
    query: PostListQuery,
    viewer_id: str | None = None,
    *,
    now: datetime | None = None,
) -> PostListResult:
    """Run the listing pipeline for one request.

    Raises:
        SearchQueryTooLongError: Before any database access, for an over-long search.
    """
    search = parse_search(query.search)
    filters = build_post_filters(
        db,
        parent_category=query.parent_category,
        category=query.category,
        post_type=query.post_type,
        search=search,
    )

    scope = resolve_scope(db, query.filter, viewer_id)
    if scope.empty:
        logger.debug("Filter %r resolved to an empty scope", query.filter)
        return PostListResult(page=query.page, limit=query.limit)

    plan = select_pagination(
        cursor_token=query.cursor,
        page=query.page,
        limit=query.limit,
        search_active=search.active,
    )
    preview_limit = None if query.include_content else settings.post_preview_limit
    order_by = _search_ordering(search) if search.active else _latest_ordering()

    page = _fetch_page(db, [*filters.all(), *scope.predicates], plan, order_by, preview_limit)
    fallback_query: SearchQuery | None = None

    if search.active and page.total == 0:
        # The requested type is replaced: the fallback always shows questions.
        fallback_predicates = [*filters.category, Eq("type", POST_TYPE_QUESTION), *scope.predicates]
        plan = PaginationPlan(mode="offset", page=query.page, limit=query.limit)
        page = _fetch_page(db, fallback_predicates, plan, _popular_ordering(), preview_limit)
        fallback_query = search
        logger.info(
            "Search %r matched nothing; falling back to %d popular questions",
            search.raw,
            page.total,
        )

    next_cursor = None
    if page.has_more and page.rows:
        last = page.rows[-1]
        next_cursor = encode_cursor(last.created_at, last.id)

    posts = decorate_posts(
        db,
        page.rows,
        viewer_id,
        include_responders=plan.mode == "offset",
        now=now,
    )
    if query.sort == SORT_POPULAR and not search.active:
        posts = rank_popular(posts)

    logger.debug(
        "Listed %d posts (mode=%s, total=%d, fallback=%s)",
        len(posts),
        plan.mode,
        page.total,
        fallback_query is not None,
    )
    return PostListResult(
        posts=posts,
        page=plan.page,
        limit=plan.limit,
        total=page.total,
        has_more=page.has_more,
        next_cursor=next_cursor,
        pagination_mode=plan.mode,
        fallback_query=fallback_query,
    )
