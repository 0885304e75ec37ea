# src/viet_kconnect/api/endpoints/posts.py
"""Post-related endpoints for the Viet K-Connect API."""

import logging

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from viet_kconnect.api.dependencies import CurrentUserDep, OptionalUserDep, SessionDep
from viet_kconnect.api.responses import (
    cache_policy,
    paginated_response,
    public_swr,
    server_error_response,
    success_response,
)
from viet_kconnect.core.errors import ApiError
from viet_kconnect.core.settings import settings
from viet_kconnect.schemas.post import PostCreate
from viet_kconnect.services.pagination import clamp_limit, parse_page
from viet_kconnect.services.post_listing import PostListQuery, list_posts
from viet_kconnect.services.post_service import (
    DEFAULT_TRENDING_PERIOD,
    create_post,
    list_trending,
    to_post_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])

TRENDING_DEFAULT_LIMIT = 10


def _include_flags(raw: str | None) -> set[str]:
    if not raw:
        return set()
    return {part.strip().lower() for part in raw.split(",") if part.strip()}


@router.get("")
async def list_posts_endpoint(
    db: SessionDep,
    viewer: OptionalUserDep,
    parent_category: str | None = Query(None, alias="parentCategory"),
    category: str | None = Query(None),
    search: str | None = Query(None, description="Free-text search over title and content"),
    page: str | None = Query(None, description="1-based page number (offset mode)"),
    limit: str | None = Query(None, description="Page size, clamped to [1, 50]"),
    post_type: str | None = Query(None, alias="type"),
    sort: str | None = Query(None, description="popular or latest"),
    filter_name: str | None = Query(None, alias="filter"),
    cursor: str | None = Query(None, description="Keyset cursor from meta.nextCursor"),
    include: str | None = Query(None, description="Comma list; 'content' returns full bodies"),
) -> JSONResponse:
    """List, search and rank posts.

    Args:
        db: Database session
        viewer: Signed-in member, or None for guests
        parent_category: Legacy category-group filter
        category: Category filter; takes precedence over parent_category
        search: Search term, at most 80 characters
        page: Page number for offset pagination
        limit: Page size
        post_type: question or share
        sort: popular re-ranks the page by trust-weighted popularity
        filter_name: following, following-users or my-posts
        cursor: Keyset cursor
        include: Extra fields to return

    Returns:
        Paginated envelope of decorated posts

    Raises:
        SearchQueryTooLongError: If the search term is longer than allowed
    """
    query = PostListQuery(
        parent_category=parent_category,
        category=category,
        search=search,
        page=parse_page(page),
        limit=clamp_limit(limit),
        post_type=post_type,
        sort=sort or "latest",
        filter=filter_name,
        cursor=cursor,
        include_content="content" in _include_flags(include),
    )
    viewer_id = viewer.id if viewer is not None else None

    try:
        result = list_posts(db, query, viewer_id)
    except ApiError:
        raise
    except Exception:
        logger.exception("Failed to list posts")
        return server_error_response()

    return paginated_response(
        [post.to_payload() for post in result.posts],
        page=result.page,
        limit=result.limit,
        total=result.total,
        meta=result.meta().to_payload(),
        cache_control=cache_policy(
            has_session=viewer is not None,
            has_filter=bool(filter_name),
            has_search=bool(search and search.strip()),
        ),
    )


@router.get("/trending")
async def trending_posts(
    db: SessionDep,
    limit: str | None = Query(None, description="Number of posts, clamped to [1, 50]"),
    period: str = Query(DEFAULT_TRENDING_PERIOD, description="day, week or month"),
) -> JSONResponse:
    """Popular posts of the recent period.

    Args:
        db: Database session
        limit: Number of posts to return
        period: Look-back window

    Returns:
        Envelope with the trending posts
    """
    try:
        posts = list_trending(
            db,
            limit=clamp_limit(limit, default=TRENDING_DEFAULT_LIMIT),
            period=period,
        )
    except Exception:
        logger.exception("Failed to load trending posts")
        return server_error_response()

    return success_response(
        [post.model_dump(by_alias=True, mode="json") for post in posts],
        cache_control=public_swr(settings.feed_cache_s_maxage, settings.feed_cache_swr),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> JSONResponse:
    """Create a new post.

    Args:
        post_data: Post creation data
        current_user: Authenticated author
        db: Database session

    Returns:
        Envelope with the stored post

    Raises:
        ValidationError: If a required field is blank
        ProhibitedContentError: If the text fails the content filter
        AccountRestrictedError: If the author is banned or suspended
    """
    try:
        post = create_post(db, current_user, post_data)
    except ApiError:
        raise
    except Exception:
        db.rollback()
        logger.exception("Failed to create post for user %s", current_user.id)
        return server_error_response()

    return success_response(
        to_post_response(post, current_user).model_dump(by_alias=True, mode="json"),
        "Post created",
        status_code=status.HTTP_201_CREATED,
    )
