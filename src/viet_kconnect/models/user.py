# src/viet_kconnect/models/user.py
"""SQLAlchemy model for community members."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from viet_kconnect.db.session import Base
from viet_kconnect.db.time import utcnow

from ._ids import new_id


class User(Base):
    """Registered member; sessions are issued by the external auth provider."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Trust signals granted by admins after verification review.
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_expert: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    badge_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    trust_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # "banned" or "suspended" restrict writes; suspensions lapse at suspended_until.
    status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    suspended_until: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
