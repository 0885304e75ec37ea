"""Static category-group mapping.

Each group parent owns a fixed list of topic slugs. This mapping, not the
live ``categories`` table, drives feed filtering.
"""

from __future__ import annotations

CATEGORY_GROUP_SLUGS: dict[str, tuple[str, ...]] = {
    "visa": ("visa-process", "status-change", "visa-checklist"),
    "students": ("scholarship", "university-ranking", "korean-language"),
    "career": ("business", "wage-info", "legal"),
    "living": ("housing", "cost-of-living", "healthcare"),
}

CHILD_TO_PARENT: dict[str, str] = {
    child: parent
    for parent, children in CATEGORY_GROUP_SLUGS.items()
    for child in children
}


def is_group_parent_slug(slug: str) -> bool:
    return slug in CATEGORY_GROUP_SLUGS


def is_group_child_slug(slug: str) -> bool:
    return slug in CHILD_TO_PARENT


def get_children_for_parent(slug: str) -> tuple[str, ...]:
    """Return the topic slugs of a group parent, or an empty tuple."""
    return CATEGORY_GROUP_SLUGS.get(slug, ())
