# src/splajompy_api/models/__init__.py
"""SQLAlchemy models for the Splajompy application."""

from .comment import Comment
from .like import Like
from .notification import Notification
from .poll import PollVote
from .post import Image, PinnedPost, Post
from .report import PostReport
from .user import Block, Follow, Mute, User, UserRelationship

__all__ = [
    "Comment",
    "Like",
    "Notification",
    "PollVote",
    "Image", "PinnedPost", "Post",
    "PostReport",
    "Block", "Follow", "Mute", "User", "UserRelationship",
]
