"""Data access helpers for notifications."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from splajompy_api.db.time import as_utc
from splajompy_api.models import Notification
from splajompy_api.schemas import Facet, NotificationOut

__all__ = ["SqlNotificationRepository"]


class SqlNotificationRepository:
    """Notification persistence backed by SQLAlchemy."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository with an async session factory."""
        self._sessionmaker = sessionmaker

    async def insert_notification(
        self,
        user_id: int,
        message: str,
        *,
        post_id: int | None = None,
        comment_id: int | None = None,
        facets: Sequence[Facet] = (),
    ) -> None:
        """Store a new unread notification for ``user_id``."""
        async with self._sessionmaker.begin() as session:
            session.add(
                Notification(
                    user_id=user_id,
                    post_id=post_id,
                    comment_id=comment_id,
                    message=message,
                    facets=[facet.model_dump() for facet in facets],
                    viewed=False,
                )
            )

    async def get_notifications_for_user(
        self,
        user_id: int,
        limit: int,
        offset: int,
    ) -> list[NotificationOut]:
        """Return notifications newest first."""
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(Notification)
                .where(Notification.user_id == user_id)
                .order_by(Notification.created_at.desc(), Notification.notification_id.desc())
                .limit(limit)
                .offset(offset)
            )
            return [NotificationOut.model_validate(row) for row in result.scalars()]

    async def get_notifications_page(
        self,
        user_id: int,
        *,
        viewed: bool,
        limit: int,
        before: datetime | None = None,
    ) -> list[NotificationOut]:
        """Return read or unread notifications created before ``before``, newest first."""
        stmt = select(Notification).where(
            Notification.user_id == user_id,
            Notification.viewed.is_(viewed),
        )
        if before is not None:
            stmt = stmt.where(Notification.created_at < as_utc(before))
        async with self._sessionmaker() as session:
            result = await session.execute(
                stmt.order_by(
                    Notification.created_at.desc(),
                    Notification.notification_id.desc(),
                ).limit(limit)
            )
            return [NotificationOut.model_validate(row) for row in result.scalars()]

    async def get_notification_by_id(self, notification_id: int) -> NotificationOut | None:
        async with self._sessionmaker() as session:
            notification = await session.get(Notification, notification_id)
            if notification is None:
                return None
            return NotificationOut.model_validate(notification)

    async def mark_notification_read(self, notification_id: int) -> None:
        """Mark a single notification as viewed."""
        async with self._sessionmaker.begin() as session:
            await session.execute(
                update(Notification)
                .where(Notification.notification_id == notification_id)
                .values(viewed=True)
            )

    async def mark_all_read(self, user_id: int) -> None:
        """Mark every notification of the user as viewed."""
        async with self._sessionmaker.begin() as session:
            await session.execute(
                update(Notification)
                .where(Notification.user_id == user_id, Notification.viewed.is_(False))
                .values(viewed=True)
            )

    async def get_unread_count(self, user_id: int) -> int:
        """Return the number of unread notifications."""
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(func.count())
                .select_from(Notification)
                .where(Notification.user_id == user_id, Notification.viewed.is_(False))
            )
            return int(result.scalar_one())
