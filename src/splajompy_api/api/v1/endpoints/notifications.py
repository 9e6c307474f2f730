# src/splajompy_api/api/v1/endpoints/notifications.py
"""Notification inbox endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query, status

from splajompy_api.core.settings import settings
from splajompy_api.schemas import CountResponse, NotificationOut

from ..dependencies import CurrentUserDep, NotificationServiceDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationOut])
async def list_notifications(
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_limit)] = settings.default_page_limit,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[NotificationOut]:
    """Return the caller's notifications, newest first."""
    return await service.list_notifications(current_user.user_id, limit, offset)


@router.post("/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notifications_read(
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
) -> None:
    """Mark every notification as read."""
    await service.mark_all_read(current_user.user_id)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_read(
    notification_id: int,
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
) -> None:
    """Mark one notification as read."""
    await service.mark_read(current_user.user_id, notification_id)


@router.get("/unread", response_model=list[NotificationOut])
async def list_unread(
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_limit)] = settings.default_page_limit,
    before: datetime | None = None,
) -> list[NotificationOut]:
    """Return unread notifications created before ``before``, newest first."""
    return await service.list_page(
        current_user.user_id, viewed=False, limit=limit, before=before
    )


@router.get("/read", response_model=list[NotificationOut])
async def list_read(
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_limit)] = settings.default_page_limit,
    before: datetime | None = None,
) -> list[NotificationOut]:
    return await service.list_page(current_user.user_id, viewed=True, limit=limit, before=before)


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(
    current_user: CurrentUserDep,
    service: NotificationServiceDep,
) -> CountResponse:
    return CountResponse(count=await service.unread_count(current_user.user_id))
