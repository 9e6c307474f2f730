# src/splajompy_api/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    feed_router,
    notifications_router,
    posts_router,
    users_router,
    wrapped_router,
)

__all__ = [
    "comments_router",
    "feed_router",
    "notifications_router",
    "posts_router",
    "users_router",
    "wrapped_router",
]
