"""Notification delivery and inbox queries."""

from __future__ import annotations

import logging
from datetime import datetime

from splajompy_api.core.errors import NotFoundError
from splajompy_api.repositories.protocols import NotificationRepository, UserRepository
from splajompy_api.schemas import NotificationOut

from .facets import generate_facets

logger = logging.getLogger(__name__)


class NotificationService:
    """Create notifications and read a user's inbox."""

    def __init__(self, notifications: NotificationRepository, users: UserRepository) -> None:
        self._notifications = notifications
        self._users = users

    async def notify(
        self,
        recipient_id: int,
        message: str,
        *,
        post_id: int | None = None,
        comment_id: int | None = None,
        mention_prefix: str | None = None,
    ) -> None:
        """Store a notification, linking every ``@username`` in ``message``.

        When ``message`` ends with user-supplied text, pass the leading part
        that names the actor as ``mention_prefix``; only that part is scanned.
        """
        scanned = message
        if mention_prefix is not None:
            if not message.startswith(mention_prefix):
                raise ValueError("mention_prefix must start the message")
            scanned = mention_prefix
        facets = await generate_facets(self._users, scanned)
        await self._notifications.insert_notification(
            recipient_id,
            message,
            post_id=post_id,
            comment_id=comment_id,
            facets=facets,
        )
        logger.debug("Notified user %s: %s", recipient_id, message)

    async def list_notifications(
        self,
        user_id: int,
        limit: int,
        offset: int,
    ) -> list[NotificationOut]:
        return await self._notifications.get_notifications_for_user(user_id, limit, offset)

    async def mark_all_read(self, user_id: int) -> None:
        await self._notifications.mark_all_read(user_id)

    async def unread_count(self, user_id: int) -> int:
        return await self._notifications.get_unread_count(user_id)

    async def list_page(
        self,
        user_id: int,
        *,
        viewed: bool,
        limit: int,
        before: datetime | None = None,
    ) -> list[NotificationOut]:
        """Return read (``viewed=True``) or unread notifications older than ``before``."""
        return await self._notifications.get_notifications_page(
            user_id,
            viewed=viewed,
            limit=limit,
            before=before,
        )

    async def mark_read(self, user_id: int, notification_id: int) -> None:
        """Mark one of the user's notifications as read.

        Raises:
            NotFoundError: If the notification does not exist or belongs to someone else.
        """
        notification = await self._notifications.get_notification_by_id(notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundError("Notification not found")
        await self._notifications.mark_notification_read(notification_id)
