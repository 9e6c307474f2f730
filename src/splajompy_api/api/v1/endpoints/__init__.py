# src/splajompy_api/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .feed import router as feed_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .users import router as users_router
from .wrapped import router as wrapped_router

__all__ = [
    "comments_router",
    "feed_router",
    "notifications_router",
    "posts_router",
    "users_router",
    "wrapped_router",
]
