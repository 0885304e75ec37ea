# src/viet_kconnect/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import CamelModel, ErrorBody, ListMeta, Pagination
from .post import PostAuthor, PostCreate, PostListItem, PostResponse, TrendingPost

__all__ = [
    "CamelModel", "ErrorBody", "ListMeta", "Pagination",
    "PostAuthor", "PostCreate", "PostListItem", "PostResponse", "TrendingPost",
]
