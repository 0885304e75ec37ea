"""Shared Pydantic schemas for the response envelope."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys, as the web client expects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ListMeta(CamelModel):
    """Cursor state of a listing plus the optional search-fallback notice."""

    next_cursor: str | None = Field(None, description="Opaque cursor for the next page.")
    has_more: bool = False
    pagination_mode: Literal["cursor", "offset"] = "offset"
    is_fallback: bool | None = None
    reason: str | None = None
    query: str | None = None
    tokens: list[str] | None = None

    def to_payload(self) -> dict[str, object]:
        """Serialize, omitting the fallback keys unless the fallback ran."""
        payload = self.model_dump(by_alias=True, mode="json")
        for key in ("isFallback", "reason", "query", "tokens"):
            if payload.get(key) is None:
                payload.pop(key, None)
        return payload


class ErrorBody(BaseModel):
    success: Literal[False] = False
    error: str
    code: str | None = None
