# src/viet_kconnect/models/post.py
"""SQLAlchemy models for posts and the responses attached to them."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from viet_kconnect.db.session import Base
from viet_kconnect.db.time import utcnow

from ._ids import new_id

POST_TYPE_QUESTION = "question"
POST_TYPE_SHARE = "share"
POST_TYPES = (POST_TYPE_QUESTION, POST_TYPE_SHARE)


class Post(Base):
    """Question or share published to the community feed."""

    __tablename__ = "posts"
    __table_args__ = (
        # Keyset pagination walks (created_at, id) descending.
        Index("ix_posts_created_at_id", "created_at", "id"),
        Index("ix_posts_category", "category"),
        Index("ix_posts_author_id", "author_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    # HTML produced by the rich text editor; may embed <img> tags.
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Top-level slug, or a group child slug on legacy rows.
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    subcategory: Mapped[str | None] = mapped_column(String(50), nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Denormalized counters maintained by the like/view endpoints.
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    adopted_answer_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )


class Answer(Base):
    """Answer written in response to a post."""

    __tablename__ = "answers"
    __table_args__ = (Index("ix_answers_post_id", "post_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_adopted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class Comment(Base):
    """Comment on a post or an answer; parent_id nests replies."""

    __tablename__ = "comments"
    __table_args__ = (Index("ix_comments_post_id", "post_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    post_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=True,
    )
    answer_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("answers.id", ondelete="CASCADE"),
        nullable=True,
    )
    parent_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
    )
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
