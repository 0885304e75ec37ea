# src/viet_kconnect/models/__init__.py
"""SQLAlchemy models for the Viet K-Connect application."""

from .category import Category, CategorySubscription, TopicSubscription
from .engagement import Bookmark, Follow, Like
from .post import POST_TYPE_QUESTION, POST_TYPE_SHARE, POST_TYPES, Answer, Comment, Post
from .user import User

__all__ = [
    "Category", "CategorySubscription", "TopicSubscription",
    "Bookmark", "Follow", "Like",
    "Answer", "Comment", "Post",
    "POST_TYPE_QUESTION", "POST_TYPE_SHARE", "POST_TYPES",
    "User",
]
