"""Profiles and social-graph edits."""

from __future__ import annotations

import logging
from datetime import datetime

from splajompy_api.core.errors import ForbiddenError, InvalidInputError, NotFoundError
from splajompy_api.repositories.protocols import UserRepository
from splajompy_api.schemas import ConnectionUser, DetailedUser, ProfileUpdate, PublicUser

from .notification_service import NotificationService
from .social_graph import SocialGraphGate

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


class UserService:
    """Profile lookups plus follow, block, mute and friend management."""

    def __init__(
        self,
        users: UserRepository,
        graph: SocialGraphGate,
        notifications: NotificationService,
    ) -> None:
        self._users = users
        self._graph = graph
        self._notifications = notifications

    async def get_user(self, viewer: PublicUser, user_id: int) -> DetailedUser:
        """Return ``user_id``'s profile relative to ``viewer``.

        Raises:
            NotFoundError: If the user does not exist or has blocked the viewer.
        """
        user = await self._require_visible_user(viewer, user_id)

        return DetailedUser(
            **user.model_dump(),
            bio=await self._users.get_bio_for_user(user_id),
            is_following=await self._users.is_following(viewer.user_id, user_id),
            is_follower=await self._users.is_following(user_id, viewer.user_id),
            is_blocking=await self._users.is_blocking(viewer.user_id, user_id),
            is_muting=await self._users.is_muting(viewer.user_id, user_id),
            is_friend=await self._users.is_friend(viewer.user_id, user_id),
        )

    async def search(self, viewer: PublicUser, prefix: str) -> list[PublicUser]:
        """Return up to ``SEARCH_LIMIT`` users whose username starts with ``prefix``.

        Raises:
            InvalidInputError: If ``prefix`` is blank.
        """
        prefix = prefix.strip().lstrip("@")
        if not prefix:
            raise InvalidInputError("Search prefix cannot be empty")
        return await self._users.search_users(prefix, viewer.user_id, SEARCH_LIMIT)

    async def update_profile(self, viewer: PublicUser, changes: ProfileUpdate) -> DetailedUser:
        """Apply the fields set in ``changes`` and return the caller's own profile."""
        fields = changes.model_dump(exclude_unset=True)
        await self._users.update_profile(viewer.user_id, **fields)
        logger.info("User %s updated profile fields %s", viewer.user_id, sorted(fields))
        return await self.get_user(viewer, viewer.user_id)

    async def list_followers(
        self,
        viewer: PublicUser,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]:
        await self._require_visible_user(viewer, user_id)
        return await self._users.get_followers(user_id, limit, before)

    async def list_following(
        self,
        viewer: PublicUser,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]:
        await self._require_visible_user(viewer, user_id)
        return await self._users.get_following(user_id, limit, before)

    async def list_mutuals(
        self,
        viewer: PublicUser,
        user_id: int,
        limit: int,
        before: datetime | None = None,
    ) -> list[ConnectionUser]:
        """Return people the viewer follows who also follow ``user_id``."""
        await self._require_visible_user(viewer, user_id)
        return await self._users.get_mutuals(viewer.user_id, user_id, limit, before)

    async def follow(self, viewer: PublicUser, user_id: int) -> None:
        """Follow a user and notify them.

        Raises:
            NotFoundError: If the user does not exist or has blocked the viewer.
            ForbiddenError: If the viewer has blocked the user.
        """
        target = await self._require_other_user(viewer, user_id, action="follow")
        if await self._graph.is_blocking(target.user_id, viewer.user_id):
            raise NotFoundError("User not found")
        if await self._graph.is_blocking(viewer.user_id, target.user_id):
            raise ForbiddenError("Unblock this user before following them")
        if await self._users.is_following(viewer.user_id, target.user_id):
            return

        await self._users.follow_user(viewer.user_id, target.user_id)
        await self._notifications.notify(
            target.user_id,
            f"@{viewer.username} started following you.",
        )

    async def unfollow(self, viewer: PublicUser, user_id: int) -> None:
        await self._require_user(user_id)
        await self._users.unfollow_user(viewer.user_id, user_id)

    async def block(self, viewer: PublicUser, user_id: int) -> None:
        """Block a user; existing follows between the two are removed."""
        await self._require_other_user(viewer, user_id, action="block")
        await self._users.block_user(viewer.user_id, user_id)
        logger.info("User %s blocked user %s", viewer.user_id, user_id)

    async def unblock(self, viewer: PublicUser, user_id: int) -> None:
        await self._require_user(user_id)
        await self._users.unblock_user(viewer.user_id, user_id)

    async def mute(self, viewer: PublicUser, user_id: int) -> None:
        await self._require_other_user(viewer, user_id, action="mute")
        await self._users.mute_user(viewer.user_id, user_id)

    async def unmute(self, viewer: PublicUser, user_id: int) -> None:
        await self._require_user(user_id)
        await self._users.unmute_user(viewer.user_id, user_id)

    async def add_friend(self, viewer: PublicUser, user_id: int) -> None:
        await self._require_other_user(viewer, user_id, action="friend")
        await self._users.add_friend(viewer.user_id, user_id)

    async def remove_friend(self, viewer: PublicUser, user_id: int) -> None:
        await self._require_user(user_id)
        await self._users.remove_friend(viewer.user_id, user_id)

    async def _require_user(self, user_id: int) -> PublicUser:
        user = await self._users.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def _require_visible_user(self, viewer: PublicUser, user_id: int) -> PublicUser:
        user = await self._require_user(user_id)
        if await self._graph.is_blocking(user_id, viewer.user_id):
            raise NotFoundError("User not found")
        return user

    async def _require_other_user(
        self,
        viewer: PublicUser,
        user_id: int,
        *,
        action: str,
    ) -> PublicUser:
        if user_id == viewer.user_id:
            raise InvalidInputError(f"You cannot {action} yourself")
        return await self._require_user(user_id)
