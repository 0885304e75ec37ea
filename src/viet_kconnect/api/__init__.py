# src/viet_kconnect/api/__init__.py
"""HTTP API routers."""

from .endpoints import posts_router

__all__ = ["posts_router"]
