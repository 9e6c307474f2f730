"""Data access helpers for likes on posts and comments."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from splajompy_api.models import Follow, Like, User
from splajompy_api.schemas import RelevantLike

__all__ = ["SqlLikeRepository"]


def _like_target(post_id: int, comment_id: int | None) -> list[object]:
    conditions: list[object] = [Like.post_id == post_id]
    if comment_id is None:
        conditions.append(Like.comment_id.is_(None))
    else:
        conditions.append(Like.comment_id == comment_id)
    return conditions


class SqlLikeRepository:
    """Like persistence backed by SQLAlchemy."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository with an async session factory."""
        self._sessionmaker = sessionmaker

    async def add_like(self, user_id: int, post_id: int, comment_id: int | None = None) -> None:
        """Record a like; liking twice is a no-op."""
        async with self._sessionmaker.begin() as session:
            existing = await session.execute(
                select(Like.like_id).where(
                    Like.user_id == user_id,
                    *_like_target(post_id, comment_id),
                )
            )
            if existing.first() is None:
                session.add(Like(user_id=user_id, post_id=post_id, comment_id=comment_id))

    async def remove_like(
        self,
        user_id: int,
        post_id: int,
        comment_id: int | None = None,
    ) -> None:
        """Remove a like if present."""
        async with self._sessionmaker.begin() as session:
            await session.execute(
                delete(Like).where(Like.user_id == user_id, *_like_target(post_id, comment_id))
            )

    async def is_liked(self, user_id: int, post_id: int, comment_id: int | None = None) -> bool:
        """Return True if the user likes the post (or comment)."""
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(
                    exists().where(Like.user_id == user_id, *_like_target(post_id, comment_id))
                )
            )
            return bool(result.scalar())

    async def get_post_likes_from_followed(
        self,
        post_id: int,
        viewer_id: int,
    ) -> list[RelevantLike]:
        """Return likers of the post whom the viewer follows, ordered by user id."""
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(User.user_id, User.username)
                .join(Like, Like.user_id == User.user_id)
                .join(Follow, Follow.following_id == User.user_id)
                .where(
                    Follow.follower_id == viewer_id,
                    *_like_target(post_id, None),
                )
                .order_by(User.user_id)
            )
            return [
                RelevantLike(user_id=user_id, username=username)
                for user_id, username in result.all()
            ]

    async def has_likes_from_others(
        self,
        post_id: int,
        excluded_user_ids: Sequence[int],
    ) -> bool:
        """Return True if any user outside ``excluded_user_ids`` likes the post."""
        conditions = _like_target(post_id, None)
        if excluded_user_ids:
            conditions.append(Like.user_id.not_in(list(excluded_user_ids)))
        async with self._sessionmaker() as session:
            result = await session.execute(select(exists().where(*conditions)))
            return bool(result.scalar())
