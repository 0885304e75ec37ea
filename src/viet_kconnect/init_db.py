"""Create the schema and seed the category tree."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from viet_kconnect.constants.categories import CATEGORY_GROUP_SLUGS
from viet_kconnect.db.session import SessionLocal, create_tables, drop_tables
from viet_kconnect.models import Category

logger = logging.getLogger(__name__)


def _display_name(slug: str) -> str:
    return slug.replace("-", " ").title()


def seed_categories(db: Session) -> int:
    """Insert any missing group parents and topics; return how many were added."""
    existing = {category.slug: category for category in db.scalars(select(Category)).all()}
    added = 0
    for parent_order, (parent_slug, children) in enumerate(CATEGORY_GROUP_SLUGS.items()):
        parent = existing.get(parent_slug)
        if parent is None:
            parent = Category(
                name=_display_name(parent_slug),
                slug=parent_slug,
                sort_order=parent_order,
            )
            db.add(parent)
            db.flush()
            existing[parent_slug] = parent
            added += 1
        for child_order, child_slug in enumerate(children):
            if child_slug in existing:
                continue
            child = Category(
                name=_display_name(child_slug),
                slug=child_slug,
                parent_id=parent.id,
                sort_order=child_order,
            )
            db.add(child)
            existing[child_slug] = child
            added += 1
    db.commit()
    return added


def init_db(reset: bool = False) -> None:
    """Initialize the database by creating all tables and seeding categories."""
    if reset:
        drop_tables()
        logger.warning("Dropped all tables")
    create_tables()
    with SessionLocal() as db:
        added = seed_categories(db)
    logger.info("Seeded %d categories", added)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="drop every table first")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)
    init_db(reset=args.reset)
    print("Database initialized.")
