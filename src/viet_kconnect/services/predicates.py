"""Composable filter predicates for post queries.

Filters are built as a small tree of immutable nodes and translated into
SQLAlchemy expressions in one place, so the filter-building code never
touches column objects or SQL fragments directly.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from sqlalchemy import and_, false, or_
from sqlalchemy.sql.elements import ColumnElement

from viet_kconnect.models import Post

__all__ = [
    "And",
    "Eq",
    "In",
    "IsNull",
    "Lt",
    "Or",
    "POST_FIELDS",
    "Predicate",
    "TextMatch",
    "any_of",
    "compile_predicate",
    "compile_predicates",
]


@dataclass(frozen=True)
class Eq:
    field: str
    value: Any


@dataclass(frozen=True)
class In:
    field: str
    values: tuple[Any, ...]


@dataclass(frozen=True)
class Lt:
    field: str
    value: Any


@dataclass(frozen=True)
class IsNull:
    field: str


@dataclass(frozen=True)
class TextMatch:
    """Case-insensitive substring match of ``term`` against any of ``fields``."""

    fields: tuple[str, ...]
    term: str


@dataclass(frozen=True)
class Or:
    items: tuple["Predicate", ...]


@dataclass(frozen=True)
class And:
    items: tuple["Predicate", ...]


Predicate = Union[Eq, In, Lt, IsNull, TextMatch, Or, And]

POST_FIELDS: Mapping[str, Any] = {
    "id": Post.id,
    "author_id": Post.author_id,
    "type": Post.type,
    "title": Post.title,
    "content": Post.content,
    "category": Post.category,
    "subcategory": Post.subcategory,
    "created_at": Post.created_at,
}


def any_of(items: Iterable[Predicate]) -> Predicate | None:
    """OR the given predicates together, collapsing trivial cases."""
    collected = tuple(items)
    if not collected:
        return None
    if len(collected) == 1:
        return collected[0]
    return Or(collected)


def compile_predicate(
    predicate: Predicate,
    fields: Mapping[str, Any] = POST_FIELDS,
) -> ColumnElement[bool]:
    """Translate a predicate tree into a SQLAlchemy boolean expression."""
    if isinstance(predicate, Eq):
        return fields[predicate.field] == predicate.value
    if isinstance(predicate, In):
        if not predicate.values:
            return false()
        return fields[predicate.field].in_(predicate.values)
    if isinstance(predicate, Lt):
        return fields[predicate.field] < predicate.value
    if isinstance(predicate, IsNull):
        return fields[predicate.field].is_(None)
    if isinstance(predicate, TextMatch):
        return or_(
            *(
                fields[name].icontains(predicate.term, autoescape=True)
                for name in predicate.fields
            )
        )
    if isinstance(predicate, Or):
        return or_(*(compile_predicate(item, fields) for item in predicate.items))
    if isinstance(predicate, And):
        return and_(*(compile_predicate(item, fields) for item in predicate.items))
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def compile_predicates(
    predicates: Sequence[Predicate],
    fields: Mapping[str, Any] = POST_FIELDS,
) -> list[ColumnElement[bool]]:
    """Compile a conjunction list; the result is passed to ``Select.where``."""
    return [compile_predicate(predicate, fields) for predicate in predicates]
