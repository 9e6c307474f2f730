"""Data access helpers for comments."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from splajompy_api.models import Comment
from splajompy_api.schemas import CommentOut, Facet

__all__ = ["SqlCommentRepository"]


class SqlCommentRepository:
    """Comment persistence backed by SQLAlchemy."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository with an async session factory."""
        self._sessionmaker = sessionmaker

    async def add_comment(
        self,
        post_id: int,
        user_id: int,
        text: str,
        facets: Sequence[Facet],
    ) -> CommentOut:
        """Insert a comment and return it."""
        comment = Comment(
            post_id=post_id,
            user_id=user_id,
            text=text,
            facets=[facet.model_dump() for facet in facets],
        )
        async with self._sessionmaker.begin() as session:
            session.add(comment)
            await session.flush()
            return CommentOut.model_validate(comment)

    async def get_comment_by_id(self, comment_id: int) -> CommentOut | None:
        """Return a comment by identifier."""
        async with self._sessionmaker() as session:
            comment = await session.get(Comment, comment_id)
            return CommentOut.model_validate(comment) if comment is not None else None

    async def get_comments_for_post(self, post_id: int) -> list[CommentOut]:
        """Return a post's comments, oldest first."""
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(Comment)
                .where(Comment.post_id == post_id)
                .order_by(Comment.created_at, Comment.comment_id)
            )
            return [CommentOut.model_validate(comment) for comment in result.scalars()]
