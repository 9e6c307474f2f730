"""Data access helpers for users and the edges between them."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import Select, delete, exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import aliased

from splajompy_api.db.time import as_utc
from splajompy_api.db.upsert import upsert_statement
from splajompy_api.models import Block, Follow, Mute, User, UserRelationship
from splajompy_api.schemas import ConnectionUser, PublicUser

__all__ = ["SqlUserRepository"]


class SqlUserRepository:
    """User and social-graph persistence backed by SQLAlchemy."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository with an async session factory."""
        self._sessionmaker = sessionmaker

    async def get_user_by_id(self, user_id: int) -> PublicUser | None:
        """Return a user's public profile by identifier."""
        async with self._sessionmaker() as session:
            user = await session.get(User, user_id)
            return PublicUser.model_validate(user) if user is not None else None

    async def get_user_by_username(self, username: str) -> PublicUser | None:
        """Return a user's public profile by username (case-insensitive)."""
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(User).where(func.lower(User.username) == username.lower())
            )
            user = result.scalars().first()
            return PublicUser.model_validate(user) if user is not None else None

    async def get_bio_for_user(self, user_id: int) -> str:
        """Return the user's bio, or an empty string."""
        async with self._sessionmaker() as session:
            result = await session.execute(select(User.bio).where(User.user_id == user_id))
            return result.scalar() or ""

    async def search_users(self, prefix: str, viewer_id: int, limit: int) -> list[PublicUser]:
        """Return users whose username starts with ``prefix`` (case-insensitive).

        Users who have blocked the viewer are left out.
        """
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(User)
                .where(
                    func.lower(User.username).startswith(prefix.lower(), autoescape=True),
                    ~exists().where(
                        Block.user_id == User.user_id,
                        Block.target_user_id == viewer_id,
                    ),
                )
                .order_by(User.username)
                .limit(limit)
            )
            return [PublicUser.model_validate(user) for user in result.scalars()]

    async def update_profile(self, user_id: int, **fields: str | None) -> None:
        """Overwrite the given profile columns (``name``, ``bio``)."""
        if not fields:
            return
        async with self._sessionmaker.begin() as session:
            await session.execute(update(User).where(User.user_id == user_id).values(**fields))

    async def get_followers(
        self,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]:
        """Return users following ``user_id``, most recent follow first."""
        stmt = (
            select(User, Follow.created_at)
            .join(Follow, Follow.follower_id == User.user_id)
            .where(Follow.following_id == user_id)
        )
        return await self._fetch_connections(stmt, Follow.created_at, limit, before)

    async def get_following(
        self,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]:
        """Return users ``user_id`` follows, most recent follow first."""
        stmt = (
            select(User, Follow.created_at)
            .join(Follow, Follow.following_id == User.user_id)
            .where(Follow.follower_id == user_id)
        )
        return await self._fetch_connections(stmt, Follow.created_at, limit, before)

    async def get_mutuals(
        self,
        viewer_id: int,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]:
        """Return followers of ``user_id`` that ``viewer_id`` also follows."""
        viewer_follow = aliased(Follow)
        stmt = (
            select(User, Follow.created_at)
            .join(Follow, Follow.follower_id == User.user_id)
            .where(
                Follow.following_id == user_id,
                exists().where(
                    viewer_follow.follower_id == viewer_id,
                    viewer_follow.following_id == User.user_id,
                ),
            )
        )
        return await self._fetch_connections(stmt, Follow.created_at, limit, before)

    async def is_following(self, follower_id: int, following_id: int) -> bool:
        """Return True if ``follower_id`` follows ``following_id``."""
        return await self._edge_exists(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )

    async def follow_user(self, follower_id: int, following_id: int) -> None:
        """Create a follow edge."""
        await self._add_edge(Follow, follower_id=follower_id, following_id=following_id)

    async def unfollow_user(self, follower_id: int, following_id: int) -> None:
        """Remove a follow edge."""
        await self._remove_edge(
            Follow,
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )

    async def is_blocking(self, user_id: int, target_user_id: int) -> bool:
        """Return True if ``user_id`` has blocked ``target_user_id``."""
        return await self._edge_exists(
            Block.user_id == user_id,
            Block.target_user_id == target_user_id,
        )

    async def block_user(self, user_id: int, target_user_id: int) -> None:
        """Block a user and drop follow edges in both directions."""
        async with self._sessionmaker.begin() as session:
            await session.execute(
                delete(Follow).where(
                    ((Follow.follower_id == user_id) & (Follow.following_id == target_user_id))
                    | ((Follow.follower_id == target_user_id) & (Follow.following_id == user_id))
                )
            )
            await session.execute(
                upsert_statement(
                    session,
                    Block,
                    {"user_id": user_id, "target_user_id": target_user_id},
                    conflict_columns=["user_id", "target_user_id"],
                )
            )

    async def unblock_user(self, user_id: int, target_user_id: int) -> None:
        """Remove a block."""
        await self._remove_edge(
            Block,
            Block.user_id == user_id,
            Block.target_user_id == target_user_id,
        )

    async def is_muting(self, user_id: int, target_user_id: int) -> bool:
        """Return True if ``user_id`` has muted ``target_user_id``."""
        return await self._edge_exists(
            Mute.user_id == user_id,
            Mute.target_user_id == target_user_id,
        )

    async def mute_user(self, user_id: int, target_user_id: int) -> None:
        """Mute a user."""
        await self._add_edge(Mute, user_id=user_id, target_user_id=target_user_id)

    async def unmute_user(self, user_id: int, target_user_id: int) -> None:
        """Remove a mute."""
        await self._remove_edge(
            Mute,
            Mute.user_id == user_id,
            Mute.target_user_id == target_user_id,
        )

    async def is_friend(self, user_id: int, target_user_id: int) -> bool:
        """Return True if ``user_id`` marked ``target_user_id`` as a friend."""
        return await self._edge_exists(
            UserRelationship.user_id == user_id,
            UserRelationship.target_user_id == target_user_id,
        )

    async def add_friend(self, user_id: int, target_user_id: int) -> None:
        """Mark a user as a friend."""
        await self._add_edge(UserRelationship, user_id=user_id, target_user_id=target_user_id)

    async def remove_friend(self, user_id: int, target_user_id: int) -> None:
        """Remove a friend mark."""
        await self._remove_edge(
            UserRelationship,
            UserRelationship.user_id == user_id,
            UserRelationship.target_user_id == target_user_id,
        )

    async def _fetch_connections(
        self,
        stmt: Select[Any],
        followed_at: Any,
        limit: int,
        before: datetime | None,
    ) -> list[ConnectionUser]:
        if before is not None:
            stmt = stmt.where(followed_at < as_utc(before))
        stmt = stmt.order_by(followed_at.desc(), User.user_id.desc()).limit(limit)
        async with self._sessionmaker() as session:
            result = await session.execute(stmt)
            return [
                ConnectionUser(
                    **PublicUser.model_validate(user).model_dump(),
                    followed_at=created_at,
                )
                for user, created_at in result.all()
            ]

    async def _edge_exists(self, *conditions: Any) -> bool:
        async with self._sessionmaker() as session:
            result = await session.execute(select(exists().where(*conditions)))
            return bool(result.scalar())

    async def _add_edge(self, model: type[Any], **keys: int) -> None:
        async with self._sessionmaker.begin() as session:
            await session.execute(
                upsert_statement(session, model, keys, conflict_columns=list(keys))
            )

    async def _remove_edge(self, model: type[Any], *conditions: Any) -> None:
        async with self._sessionmaker.begin() as session:
            await session.execute(delete(model).where(*conditions))
