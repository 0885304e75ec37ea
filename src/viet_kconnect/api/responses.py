"""Response envelope helpers and cache-control policy.

Every endpoint answers with ``{"success": true, ...}`` or
``{"success": false, "error": ..., "code": ...}``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from viet_kconnect.core.settings import settings
from viet_kconnect.schemas.common import ErrorBody, Pagination
from viet_kconnect.services.pagination import total_pages

CACHE_NO_STORE = "no-store"
CACHE_PRIVATE_NO_STORE = "private, no-store"


def public_swr(s_maxage: int, stale_while_revalidate: int) -> str:
    return f"public, s-maxage={s_maxage}, stale-while-revalidate={stale_while_revalidate}"


def cache_policy(has_session: bool, has_filter: bool, has_search: bool) -> str:
    """Shared caches may only keep anonymous, unfiltered, unsearched listings."""
    if has_session or has_filter or has_search:
        return CACHE_PRIVATE_NO_STORE
    return public_swr(settings.feed_cache_s_maxage, settings.feed_cache_swr)


def _with_cache(response: JSONResponse, cache_control: str | None) -> JSONResponse:
    if cache_control:
        response.headers["Cache-Control"] = cache_control
    return response


def success_response(
    data: Any,
    message: str | None = None,
    *,
    status_code: int = status.HTTP_200_OK,
    cache_control: str | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"success": True, "data": data}
    if message is not None:
        body["message"] = message
    return _with_cache(JSONResponse(body, status_code=status_code), cache_control)


def error_response(
    error: str,
    code: str | None = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
) -> JSONResponse:
    body = ErrorBody(error=error, code=code)
    response = JSONResponse(body.model_dump(), status_code=status_code)
    return _with_cache(response, CACHE_NO_STORE)


def paginated_response(
    data: Sequence[Any],
    page: int,
    limit: int,
    total: int,
    meta: Mapping[str, Any] | None = None,
    *,
    cache_control: str | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "success": True,
        "data": list(data),
        "pagination": Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages(total, limit),
        ).model_dump(by_alias=True),
    }
    if meta is not None:
        body["meta"] = dict(meta)
    return _with_cache(JSONResponse(body), cache_control)


def server_error_response(message: str = "Internal server error") -> JSONResponse:
    return error_response(message, "SERVER_ERROR", status.HTTP_500_INTERNAL_SERVER_ERROR)
