"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_serializer, field_validator

from viet_kconnect.db.time import isoformat_utc

from .common import CamelModel

MAX_TAGS = 3


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    type: Literal["question", "share"]
    title: str = Field(..., max_length=500)
    content: str
    category: str = Field(..., max_length=50)
    subcategory: str | None = Field(None, max_length=50)
    tags: list[str] = Field(default_factory=list)

    @field_validator("title", "content", "category")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        return value.strip()

    @field_validator("subcategory")
    @classmethod
    def _blank_subcategory(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: object) -> list[str]:
        if not isinstance(value, list):
            return []
        tags: list[str] = []
        for tag in value:
            if not isinstance(tag, str):
                continue
            cleaned = tag.strip().lstrip("#").strip()
            if cleaned and cleaned not in tags:
                tags.append(cleaned)
        return tags[:MAX_TAGS]


class PostAuthor(CamelModel):
    """Author projection embedded in list items."""

    id: str
    name: str | None = None
    display_name: str | None = None
    image: str | None = None
    is_verified: bool = False
    is_expert: bool = False
    badge_type: str | None = None
    is_following: bool = False


class _Timestamps(CamelModel):
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return isoformat_utc(value)


class PostListItem(_Timestamps):
    """A post decorated for feed and search listings."""

    id: str
    author_id: str
    type: str
    title: str
    content: str
    excerpt: str
    category: str
    subcategory: str | None = None
    tags: list[str] = Field(default_factory=list)
    views: int = 0
    likes: int = 0
    likes_count: int = 0
    is_resolved: bool = False
    adopted_answer_id: str | None = None
    author: PostAuthor | None = None

    trust_badge: str
    trust_weight: float
    thumbnail: str | None = None
    thumbnails: list[str] = Field(default_factory=list)
    image_count: int = 0

    is_liked: bool = False
    is_bookmarked: bool = False
    answers_count: int = 0
    post_comments_count: int = 0
    comments_count: int = 0
    # Only offset-paginated pages carry responder counts.
    certified_responder_count: int | None = None
    other_responder_count: int | None = None

    def to_payload(self) -> dict[str, object]:
        exclude = set()
        if self.certified_responder_count is None:
            exclude.add("certified_responder_count")
        if self.other_responder_count is None:
            exclude.add("other_responder_count")
        return self.model_dump(by_alias=True, mode="json", exclude=exclude)


class PostResponse(_Timestamps):
    """Schema for a single stored post returned by the write endpoint."""

    id: str
    author_id: str
    type: str
    title: str
    content: str
    category: str
    subcategory: str | None = None
    tags: list[str] = Field(default_factory=list)
    views: int = 0
    likes: int = 0
    is_resolved: bool = False
    adopted_answer_id: str | None = None
    author: PostAuthor | None = None


class TrendingPost(_Timestamps):
    """Compact post entry for the trending sidebar."""

    id: str
    author_id: str
    type: str
    title: str
    category: str
    subcategory: str | None = None
    views: int = 0
    likes: int = 0
    author: PostAuthor | None = None
