"""Repository layer: store protocols and their SQLAlchemy implementations."""

from .comment_repo import SqlCommentRepository
from .like_repo import SqlLikeRepository
from .notification_repo import SqlNotificationRepository
from .post_repo import SqlPostRepository
from .protocols import (
    CommentRepository,
    LikeRepository,
    NotificationRepository,
    PostRepository,
    UserRepository,
    WrappedRepository,
)
from .user_repo import SqlUserRepository
from .wrapped_repo import SqlWrappedRepository

__all__ = [
    "CommentRepository", "LikeRepository", "NotificationRepository",
    "PostRepository", "UserRepository", "WrappedRepository",
    "SqlCommentRepository", "SqlLikeRepository", "SqlNotificationRepository",
    "SqlPostRepository", "SqlUserRepository", "SqlWrappedRepository",
]
