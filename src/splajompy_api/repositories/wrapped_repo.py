"""Aggregate queries behind the year-in-review summary."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import Select, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from splajompy_api.db.time import as_utc
from splajompy_api.models import Comment, Image, Like, PollVote, Post
from splajompy_api.schemas import ContentTotals

__all__ = ["SqlWrappedRepository"]


def _within(column: Any, start: datetime, end: datetime) -> Any:
    return (column >= as_utc(start)) & (column < as_utc(end))


class SqlWrappedRepository:
    """Read-only year-in-review statistics backed by SQLAlchemy.

    Every query is limited to rows created in ``[start, end)``.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository with an async session factory."""
        self._sessionmaker = sessionmaker

    async def has_post(self, user_id: int, start: datetime, end: datetime) -> bool:
        return await self._scalar_bool(
            select(
                exists().where(Post.user_id == user_id, _within(Post.created_at, start, end))
            )
        )

    async def has_received_like(self, user_id: int, start: datetime, end: datetime) -> bool:
        """Return True if any of the user's posts was liked by someone else."""
        return await self._scalar_bool(
            select(
                exists()
                .where(Like.post_id == Post.post_id)
                .where(
                    Post.user_id == user_id,
                    Like.user_id != user_id,
                    Like.comment_id.is_(None),
                    _within(Like.created_at, start, end),
                )
            )
        )

    async def get_activity_timestamps(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> list[datetime]:
        """Return creation times of the user's posts, comments and likes."""
        timestamps: list[datetime] = []
        async with self._sessionmaker() as session:
            for column, owner in (
                (Post.created_at, Post.user_id),
                (Comment.created_at, Comment.user_id),
                (Like.created_at, Like.user_id),
            ):
                result = await session.execute(
                    select(column).where(owner == user_id, _within(column, start, end))
                )
                timestamps.extend(as_utc(value) for value in result.scalars())
        return timestamps

    async def get_content_totals(
        self,
        start: datetime,
        end: datetime,
        user_id: int | None = None,
    ) -> ContentTotals:
        """Count posts, comments and likes, site-wide or for one user."""
        counts: dict[str, int] = {}
        async with self._sessionmaker() as session:
            for name, model in (("posts", Post), ("comments", Comment), ("likes", Like)):
                stmt = select(func.count()).select_from(model).where(
                    _within(model.created_at, start, end)
                )
                if user_id is not None:
                    stmt = stmt.where(model.user_id == user_id)
                counts[name] = int((await session.execute(stmt)).scalar_one())
        return ContentTotals(**counts)

    async def get_average_post_length(
        self,
        start: datetime,
        end: datetime,
        user_id: int | None = None,
    ) -> float:
        stmt = select(func.avg(func.length(Post.text))).where(
            _within(Post.created_at, start, end)
        )
        if user_id is not None:
            stmt = stmt.where(Post.user_id == user_id)
        async with self._sessionmaker() as session:
            average = (await session.execute(stmt)).scalar()
            return float(average or 0)

    async def get_average_image_count(
        self,
        start: datetime,
        end: datetime,
        user_id: int | None = None,
    ) -> float:
        """Return images per post for posts created in the range."""
        conditions = [_within(Post.created_at, start, end)]
        if user_id is not None:
            conditions.append(Post.user_id == user_id)
        async with self._sessionmaker() as session:
            post_count = (
                await session.execute(select(func.count()).select_from(Post).where(*conditions))
            ).scalar_one()
            if not post_count:
                return 0.0
            image_count = (
                await session.execute(
                    select(func.count())
                    .select_from(Image)
                    .join(Post, Post.post_id == Image.post_id)
                    .where(*conditions)
                )
            ).scalar_one()
            return image_count / post_count

    async def get_most_liked_post_id(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> int | None:
        """Return the user's post with the most likes; ties go to the newer post."""
        like_count = func.count(Like.like_id)
        stmt = (
            select(Post.post_id)
            .join(Like, (Like.post_id == Post.post_id) & Like.comment_id.is_(None))
            .where(Post.user_id == user_id, _within(Post.created_at, start, end))
            .group_by(Post.post_id)
            .order_by(like_count.desc(), Post.post_id.desc())
            .limit(1)
        )
        async with self._sessionmaker() as session:
            return (await session.execute(stmt)).scalar()

    async def get_post_likes_given(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> dict[int, int]:
        """Return likes the user gave to other people's posts, keyed by author."""
        stmt = (
            select(Post.user_id, func.count())
            .join(Like, Like.post_id == Post.post_id)
            .where(
                Like.user_id == user_id,
                Like.comment_id.is_(None),
                Post.user_id != user_id,
                _within(Like.created_at, start, end),
            )
            .group_by(Post.user_id)
        )
        return await self._counts_by_user(stmt)

    async def get_comment_likes_given(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> dict[int, int]:
        """Return likes the user gave to other people's comments, keyed by commenter."""
        stmt = (
            select(Comment.user_id, func.count())
            .join(Like, Like.comment_id == Comment.comment_id)
            .where(
                Like.user_id == user_id,
                Comment.user_id != user_id,
                _within(Like.created_at, start, end),
            )
            .group_by(Comment.user_id)
        )
        return await self._counts_by_user(stmt)

    async def get_comments_given(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> dict[int, int]:
        """Return comments the user left on other people's posts, keyed by post author."""
        stmt = (
            select(Post.user_id, func.count())
            .join(Comment, Comment.post_id == Post.post_id)
            .where(
                Comment.user_id == user_id,
                Post.user_id != user_id,
                _within(Comment.created_at, start, end),
            )
            .group_by(Post.user_id)
        )
        return await self._counts_by_user(stmt)

    async def get_voted_poll_post_ids(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> list[int]:
        """Return ids of posts created in the range whose poll the user voted in."""
        stmt = (
            select(Post.post_id)
            .join(PollVote, PollVote.post_id == Post.post_id)
            .where(PollVote.user_id == user_id, _within(Post.created_at, start, end))
            .order_by(Post.post_id)
        )
        async with self._sessionmaker() as session:
            return [int(post_id) for post_id in (await session.execute(stmt)).scalars()]

    async def get_texts(self, user_id: int, start: datetime, end: datetime) -> list[str]:
        """Return the text of the user's posts and comments."""
        texts: list[str] = []
        async with self._sessionmaker() as session:
            for model in (Post, Comment):
                result = await session.execute(
                    select(model.text).where(
                        model.user_id == user_id,
                        _within(model.created_at, start, end),
                    )
                )
                texts.extend(text or "" for text in result.scalars())
        return texts

    async def _scalar_bool(self, stmt: Select[Any]) -> bool:
        async with self._sessionmaker() as session:
            return bool((await session.execute(stmt)).scalar())

    async def _counts_by_user(self, stmt: Select[Any]) -> dict[int, int]:
        async with self._sessionmaker() as session:
            result = await session.execute(stmt)
            return {int(user_id): int(count) for user_id, count in result.all()}
