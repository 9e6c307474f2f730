"""Block checks shared by feed resolution and profile lookups."""

from __future__ import annotations

from splajompy_api.repositories.protocols import UserRepository


class SocialGraphGate:
    """Answer visibility questions about the block graph.

    Store failures propagate to the caller; a failed check never counts as
    "not blocked".
    """

    def __init__(self, users: UserRepository) -> None:
        self._users = users

    async def is_blocking(self, user_id: int, target_user_id: int) -> bool:
        """Return True if ``user_id`` has blocked ``target_user_id``."""
        return await self._users.is_blocking(user_id, target_user_id)

    async def is_blocked_either_way(self, user_id: int, other_user_id: int) -> bool:
        """Return True if either user has blocked the other."""
        if await self._users.is_blocking(user_id, other_user_id):
            return True
        return await self._users.is_blocking(other_user_id, user_id)
