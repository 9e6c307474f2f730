# src/splajompy_api/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentOut, DetailedComment
from .common import CountResponse, Facet
from .feed import CursorPage, FeedCandidate, FeedType, OffsetPage, Page
from .notification import NotificationOut
from .post import (
    DetailedPoll,
    DetailedPost,
    ImageData,
    ImageOut,
    Poll,
    PollAttachment,
    PollOptionDetail,
    PostCreate,
    PostOut,
    RelevantLike,
)
from .user import ConnectionUser, DetailedUser, ProfileUpdate, PublicUser
from .wrapped import (
    ActivityData,
    ComparativePostStatistics,
    ContentTotals,
    FavoriteUser,
    SliceData,
    WrappedData,
)

__all__ = [
    "CommentCreate", "CommentOut", "DetailedComment",
    "CountResponse", "Facet",
    "CursorPage", "FeedCandidate", "FeedType", "OffsetPage", "Page",
    "NotificationOut",
    "DetailedPoll", "DetailedPost", "ImageData", "ImageOut", "Poll", "PollAttachment",
    "PollOptionDetail", "PostCreate", "PostOut", "RelevantLike",
    "ConnectionUser", "DetailedUser", "ProfileUpdate", "PublicUser",
    "ActivityData", "ComparativePostStatistics", "ContentTotals", "FavoriteUser", "SliceData",
    "WrappedData",
]
