"""Viewer-scoped listing filters: subscriptions, follows and own posts."""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session

from viet_kconnect.constants.categories import is_group_parent_slug
from viet_kconnect.models import Category, CategorySubscription, Follow, TopicSubscription

from .predicates import Eq, In, Predicate, any_of

__all__ = [
    "FILTER_FOLLOWING",
    "FILTER_FOLLOWING_USERS",
    "FILTER_MY_POSTS",
    "Scope",
    "resolve_scope",
    "subscribed_slugs",
]

FILTER_FOLLOWING = "following"
FILTER_FOLLOWING_USERS = "following-users"
FILTER_MY_POSTS = "my-posts"


@dataclass(frozen=True)
class Scope:
    """Extra predicates for the viewer, or ``empty`` when nothing can match."""

    predicates: list[Predicate] = field(default_factory=list)
    empty: bool = False


EMPTY_SCOPE = Scope(empty=True)
UNRESTRICTED = Scope()


def subscribed_slugs(db: Session, viewer_id: str) -> list[str]:
    """Slugs of every category and topic the viewer subscribes to."""
    category_ids = db.scalars(
        select(CategorySubscription.category_id).where(CategorySubscription.user_id == viewer_id)
    ).all()
    topic_ids = db.scalars(
        select(TopicSubscription.category_id).where(TopicSubscription.user_id == viewer_id)
    ).all()
    ids = {category_id for category_id in [*category_ids, *topic_ids] if category_id}
    if not ids:
        return []
    slugs = db.scalars(select(Category.slug).where(Category.id.in_(ids))).all()
    return sorted({slug for slug in slugs if slug})


def _following_scope(db: Session, viewer_id: str) -> Scope:
    slugs = subscribed_slugs(db, viewer_id)
    if not slugs:
        return EMPTY_SCOPE
    parents = tuple(slug for slug in slugs if is_group_parent_slug(slug))
    topics = tuple(slug for slug in slugs if not is_group_parent_slug(slug))
    clauses: list[Predicate] = []
    if parents:
        clauses.append(In("category", parents))
    if topics:
        clauses.append(In("subcategory", topics))
        clauses.append(In("category", topics))
    predicate = any_of(clauses)
    return Scope(predicates=[predicate]) if predicate is not None else EMPTY_SCOPE


def _following_users_scope(db: Session, viewer_id: str) -> Scope:
    following_ids = tuple(
        db.scalars(select(Follow.following_id).where(Follow.follower_id == viewer_id)).all()
    )
    if not following_ids:
        return EMPTY_SCOPE
    return Scope(predicates=[In("author_id", following_ids)])


def resolve_scope(db: Session, filter_name: str | None, viewer_id: str | None) -> Scope:
    """Resolve the ``filter`` parameter for the current viewer.

    Anonymous viewers get an empty scope for ``following`` and
    ``following-users`` without touching the database. ``my-posts`` is
    ignored for anonymous viewers, as are unknown filter names.
    """
    if filter_name == FILTER_FOLLOWING:
        if not viewer_id:
            return EMPTY_SCOPE
        return _following_scope(db, viewer_id)
    if filter_name == FILTER_FOLLOWING_USERS:
        if not viewer_id:
            return EMPTY_SCOPE
        return _following_users_scope(db, viewer_id)
    if filter_name == FILTER_MY_POSTS and viewer_id:
        return Scope(predicates=[Eq("author_id", viewer_id)])
    return UNRESTRICTED
