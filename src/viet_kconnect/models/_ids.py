"""Identifier helpers shared by the ORM models."""

import uuid


def new_id() -> str:
    """Return a random UUID4 rendered as a string primary key."""
    return str(uuid.uuid4())
