"""Translate listing query parameters into post predicates."""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session

from viet_kconnect.constants.categories import (
    get_children_for_parent,
    is_group_child_slug,
    is_group_parent_slug,
)
from viet_kconnect.core.errors import SearchQueryTooLongError
from viet_kconnect.core.settings import settings
from viet_kconnect.models import POST_TYPES, Category

from .predicates import Eq, In, Or, Predicate, TextMatch

logger = logging.getLogger(__name__)

__all__ = [
    "PostFilters",
    "SearchQuery",
    "build_post_filters",
    "group_category_predicate",
    "parse_search",
    "search_predicates",
    "tokenize",
]

SEARCH_FIELDS = ("title", "content")
ALL_CATEGORIES = "all"

# Anything that is not a letter or a digit separates tokens.
_SEPARATOR_RE = re.compile(r"[\W_]+", re.UNICODE)


def tokenize(text: str, max_tokens: int | None = None) -> list[str]:
    """Split a search string into lower-cased, de-duplicated word tokens.

    >>> tokenize("Hello, HELLO world!!")
    ['hello', 'world']
    """
    limit = settings.search_max_tokens if max_tokens is None else max_tokens
    normalized = unicodedata.normalize("NFC", text).lower()
    tokens: list[str] = []
    for token in _SEPARATOR_RE.sub(" ", normalized).split():
        if token in tokens:
            continue
        tokens.append(token)
        if len(tokens) >= limit:
            break
    return tokens


@dataclass(frozen=True)
class SearchQuery:
    """A validated free-text search."""

    raw: str = ""
    tokens: tuple[str, ...] = ()

    @property
    def active(self) -> bool:
        return bool(self.raw)

    @property
    def terms(self) -> tuple[str, ...]:
        """Terms that must each appear; the raw string when nothing tokenized."""
        if self.tokens:
            return self.tokens
        return (self.raw,) if self.raw else ()


def parse_search(raw: str | None) -> SearchQuery:
    """Trim and validate the search parameter.

    Raises:
        SearchQueryTooLongError: If the trimmed term exceeds the configured length.
    """
    term = (raw or "").strip()
    if len(term) > settings.search_max_length:
        raise SearchQueryTooLongError(settings.search_max_length)
    if not term:
        return SearchQuery()
    return SearchQuery(raw=term, tokens=tuple(tokenize(term)))


def search_predicates(search: SearchQuery) -> list[Predicate]:
    """Every term must appear in the title or the content, in any order."""
    return [TextMatch(SEARCH_FIELDS, term) for term in search.terms]


def group_category_predicate(slug: str) -> Predicate | None:
    """Predicate for a category-group slug, or None when ``slug`` is not grouped.

    A parent matches its own slug, any child stored as the category, or any
    child stored as the subcategory. A child also matches legacy posts that
    stored it as the top-level category.
    """
    if is_group_parent_slug(slug):
        children = get_children_for_parent(slug)
        if not children:
            return Eq("category", slug)
        return Or((In("category", (slug, *children)), In("subcategory", children)))
    if is_group_child_slug(slug):
        return Or((Eq("subcategory", slug), Eq("category", slug)))
    return None


def _legacy_parent_predicate(db: Session, parent_category: str) -> Predicate:
    child_ids = tuple(
        db.scalars(select(Category.id).where(Category.parent_id == parent_category)).all()
    )
    if child_ids:
        return In("category", child_ids)
    return Eq("category", parent_category)


@dataclass
class PostFilters:
    """Predicates grouped by origin so the fallback can drop some of them."""

    category: list[Predicate] = field(default_factory=list)
    type: list[Predicate] = field(default_factory=list)
    search: list[Predicate] = field(default_factory=list)

    def all(self) -> list[Predicate]:
        return [*self.category, *self.type, *self.search]


def build_post_filters(
    db: Session,
    *,
    parent_category: str | None = None,
    category: str | None = None,
    post_type: str | None = None,
    search: SearchQuery | None = None,
) -> PostFilters:
    """Build the category, type and search predicates for a listing request.

    ``category`` takes precedence over ``parent_category``. Only a
    ``parent_category`` that is not part of a category group consults the
    ``categories`` table.
    """
    filters = PostFilters()

    if category and category != ALL_CATEGORIES:
        filters.category.append(group_category_predicate(category) or Eq("category", category))
    elif parent_category and parent_category != ALL_CATEGORIES:
        grouped = group_category_predicate(parent_category)
        if grouped is None:
            grouped = _legacy_parent_predicate(db, parent_category)
        filters.category.append(grouped)

    if post_type in POST_TYPES:
        filters.type.append(Eq("type", post_type))

    if search is not None and search.active:
        filters.search.extend(search_predicates(search))

    logger.debug(
        "Built post filters: %d category, %d type, %d search",
        len(filters.category),
        len(filters.type),
        len(filters.search),
    )
    return filters

