"""Store interfaces consumed by the service layer.

Services depend on these protocols only. The SQL implementations live beside
this module; tests substitute in-memory fakes.
"""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from splajompy_api.schemas import (
    CommentOut,
    ConnectionUser,
    ContentTotals,
    Facet,
    FeedCandidate,
    ImageOut,
    NotificationOut,
    Page,
    PollAttachment,
    PostOut,
    PublicUser,
    RelevantLike,
)


class PostRepository(Protocol):
    """Posts, images, pins and poll votes."""

    async def insert_post(
        self,
        user_id: int,
        text: str,
        facets: Sequence[Facet],
        attributes: PollAttachment | None,
    ) -> PostOut: ...

    async def delete_post(self, post_id: int) -> None: ...

    async def get_post_by_id(self, post_id: int) -> PostOut | None: ...

    async def get_images_for_post(self, post_id: int) -> list[ImageOut]: ...

    async def insert_image(
        self,
        post_id: int,
        height: int,
        width: int,
        image_blob_url: str,
        display_order: int,
    ) -> ImageOut: ...

    async def get_comment_count_for_post(self, post_id: int) -> int: ...

    async def get_all_post_ids(self, viewer_id: int, page: Page) -> list[int]: ...

    async def get_post_ids_for_following(self, viewer_id: int, page: Page) -> list[int]: ...

    async def get_post_ids_for_user(self, user_id: int, page: Page) -> list[int]: ...

    async def get_post_ids_for_mutual_feed(
        self,
        viewer_id: int,
        page: Page,
    ) -> list[FeedCandidate]: ...

    async def get_pinned_post_id(self, user_id: int) -> int | None: ...

    async def pin_post(self, user_id: int, post_id: int) -> None: ...

    async def unpin_post(self, user_id: int) -> None: ...

    async def get_user_vote_in_poll(self, post_id: int, user_id: int) -> int | None: ...

    async def get_poll_votes_grouped(self, post_id: int) -> dict[int, int]: ...

    async def insert_vote(self, post_id: int, user_id: int, option_index: int) -> None: ...

    async def report_post(self, post_id: int, reporter_id: int) -> None: ...


class LikeRepository(Protocol):
    """Likes on posts (``comment_id`` None) and on comments."""

    async def add_like(self, user_id: int, post_id: int, comment_id: int | None = None) -> None: ...

    async def remove_like(
        self,
        user_id: int,
        post_id: int,
        comment_id: int | None = None,
    ) -> None: ...

    async def is_liked(self, user_id: int, post_id: int, comment_id: int | None = None) -> bool: ...

    async def get_post_likes_from_followed(
        self,
        post_id: int,
        viewer_id: int,
    ) -> list[RelevantLike]: ...

    async def has_likes_from_others(
        self,
        post_id: int,
        excluded_user_ids: Sequence[int],
    ) -> bool: ...


class UserRepository(Protocol):
    """Users and the follow, block, mute and friend edges between them."""

    async def get_user_by_id(self, user_id: int) -> PublicUser | None: ...

    async def get_user_by_username(self, username: str) -> PublicUser | None: ...

    async def get_bio_for_user(self, user_id: int) -> str: ...

    async def search_users(
        self,
        prefix: str,
        viewer_id: int,
        limit: int,
    ) -> list[PublicUser]: ...

    async def update_profile(self, user_id: int, **fields: str | None) -> None: ...

    async def get_followers(
        self,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]: ...

    async def get_following(
        self,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]: ...

    async def get_mutuals(
        self,
        viewer_id: int,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]: ...

    async def is_following(self, follower_id: int, following_id: int) -> bool: ...

    async def follow_user(self, follower_id: int, following_id: int) -> None: ...

    async def unfollow_user(self, follower_id: int, following_id: int) -> None: ...

    async def is_blocking(self, user_id: int, target_user_id: int) -> bool: ...

    async def block_user(self, user_id: int, target_user_id: int) -> None: ...

    async def unblock_user(self, user_id: int, target_user_id: int) -> None: ...

    async def is_muting(self, user_id: int, target_user_id: int) -> bool: ...

    async def mute_user(self, user_id: int, target_user_id: int) -> None: ...

    async def unmute_user(self, user_id: int, target_user_id: int) -> None: ...

    async def is_friend(self, user_id: int, target_user_id: int) -> bool: ...

    async def add_friend(self, user_id: int, target_user_id: int) -> None: ...

    async def remove_friend(self, user_id: int, target_user_id: int) -> None: ...


class CommentRepository(Protocol):
    """Flat comments on posts."""

    async def add_comment(
        self,
        post_id: int,
        user_id: int,
        text: str,
        facets: Sequence[Facet],
    ) -> CommentOut: ...

    async def get_comment_by_id(self, comment_id: int) -> CommentOut | None: ...

    async def get_comments_for_post(self, post_id: int) -> list[CommentOut]: ...


class NotificationRepository(Protocol):
    """Per-user notification inbox."""

    async def insert_notification(
        self,
        user_id: int,
        message: str,
        *,
        post_id: int | None = None,
        comment_id: int | None = None,
        facets: Sequence[Facet] = (),
    ) -> None: ...

    async def get_notifications_for_user(
        self,
        user_id: int,
        limit: int,
        offset: int,
    ) -> list[NotificationOut]: ...

    async def get_notifications_page(
        self,
        user_id: int,
        *,
        viewed: bool,
        limit: int,
        before: datetime | None = None,
    ) -> list[NotificationOut]: ...

    async def get_notification_by_id(self, notification_id: int) -> NotificationOut | None: ...

    async def mark_notification_read(self, notification_id: int) -> None: ...

    async def mark_all_read(self, user_id: int) -> None: ...

    async def get_unread_count(self, user_id: int) -> int: ...


class WrappedRepository(Protocol):
    """Year-in-review aggregates over the half-open range ``[start, end)``."""

    async def has_post(self, user_id: int, start: datetime, end: datetime) -> bool: ...

    async def has_received_like(self, user_id: int, start: datetime, end: datetime) -> bool: ...

    async def get_activity_timestamps(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> list[datetime]: ...

    async def get_content_totals(
        self,
        start: datetime,
        end: datetime,
        user_id: int | None = None,
    ) -> ContentTotals: ...

    async def get_average_post_length(
        self,
        start: datetime,
        end: datetime,
        user_id: int | None = None,
    ) -> float: ...

    async def get_average_image_count(
        self,
        start: datetime,
        end: datetime,
        user_id: int | None = None,
    ) -> float: ...

    async def get_most_liked_post_id(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> int | None: ...

    async def get_post_likes_given(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> dict[int, int]: ...

    async def get_comment_likes_given(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> dict[int, int]: ...

    async def get_comments_given(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> dict[int, int]: ...

    async def get_voted_poll_post_ids(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> list[int]: ...

    async def get_texts(self, user_id: int, start: datetime, end: datetime) -> list[str]: ...
