"""Badge types granted to verified members."""

from __future__ import annotations

BADGE_TYPES: tuple[str, ...] = (
    "verified_student",
    "verified_worker",
    "verified_user",
    "expert",
    "expert_visa",
    "expert_employment",
    "trusted_answerer",
)

EXPERT_BADGE_TYPES = frozenset({"expert", "expert_visa", "expert_employment"})


def normalize_badge_type(value: object) -> str | None:
    """Return the known badge type for ``value`` or None."""
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    if normalized in BADGE_TYPES:
        return normalized
    return None


def is_expert_badge_type(value: object) -> bool:
    return normalize_badge_type(value) in EXPERT_BADGE_TYPES
