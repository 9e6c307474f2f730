# src/splajompy_api/api/v1/endpoints/users.py
"""User profile and relationship endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query, status

from splajompy_api.core.settings import settings
from splajompy_api.schemas import ConnectionUser, DetailedUser, ProfileUpdate, PublicUser

from ..dependencies import CurrentUserDep, UserServiceDep

router = APIRouter(prefix="/users", tags=["users"])

LimitQuery = Annotated[int, Query(ge=1, le=settings.max_page_limit)]


@router.get("/search", response_model=list[PublicUser])
async def search_users(
    current_user: CurrentUserDep,
    service: UserServiceDep,
    prefix: Annotated[str, Query(max_length=100)] = "",
) -> list[PublicUser]:
    """Return users whose username starts with ``prefix``."""
    return await service.search(current_user, prefix)


@router.patch("/me", response_model=DetailedUser)
async def update_profile(
    changes: ProfileUpdate,
    current_user: CurrentUserDep,
    service: UserServiceDep,
) -> DetailedUser:
    """Update the caller's display name and bio."""
    return await service.update_profile(current_user, changes)


@router.get("/{user_id}", response_model=DetailedUser)
async def get_user(
    user_id: int,
    current_user: CurrentUserDep,
    service: UserServiceDep,
) -> DetailedUser:
    """Return a profile relative to the caller."""
    return await service.get_user(current_user, user_id)


@router.get("/{user_id}/followers", response_model=list[ConnectionUser])
async def list_followers(
    user_id: int,
    current_user: CurrentUserDep,
    service: UserServiceDep,
    limit: LimitQuery = settings.default_page_limit,
    before: datetime | None = None,
) -> list[ConnectionUser]:
    """Return the user's followers, most recent first."""
    return await service.list_followers(current_user, user_id, limit, before)


@router.get("/{user_id}/following", response_model=list[ConnectionUser])
async def list_following(
    user_id: int,
    current_user: CurrentUserDep,
    service: UserServiceDep,
    limit: LimitQuery = settings.default_page_limit,
    before: datetime | None = None,
) -> list[ConnectionUser]:
    return await service.list_following(current_user, user_id, limit, before)


@router.get("/{user_id}/mutuals", response_model=list[ConnectionUser])
async def list_mutuals(
    user_id: int,
    current_user: CurrentUserDep,
    service: UserServiceDep,
    limit: LimitQuery = settings.default_page_limit,
    before: datetime | None = None,
) -> list[ConnectionUser]:
    """Return people the caller follows who also follow the user."""
    return await service.list_mutuals(current_user, user_id, limit, before)


@router.post("/{user_id}/follow", status_code=status.HTTP_204_NO_CONTENT)
async def follow_user(user_id: int, current_user: CurrentUserDep, service: UserServiceDep) -> None:
    await service.follow(current_user, user_id)


@router.delete("/{user_id}/follow", status_code=status.HTTP_204_NO_CONTENT)
async def unfollow_user(
    user_id: int,
    current_user: CurrentUserDep,
    service: UserServiceDep,
) -> None:
    await service.unfollow(current_user, user_id)


@router.post("/{user_id}/block", status_code=status.HTTP_204_NO_CONTENT)
async def block_user(user_id: int, current_user: CurrentUserDep, service: UserServiceDep) -> None:
    await service.block(current_user, user_id)


@router.delete("/{user_id}/block", status_code=status.HTTP_204_NO_CONTENT)
async def unblock_user(
    user_id: int,
    current_user: CurrentUserDep,
    service: UserServiceDep,
) -> None:
    await service.unblock(current_user, user_id)


@router.post("/{user_id}/mute", status_code=status.HTTP_204_NO_CONTENT)
async def mute_user(user_id: int, current_user: CurrentUserDep, service: UserServiceDep) -> None:
    await service.mute(current_user, user_id)


@router.delete("/{user_id}/mute", status_code=status.HTTP_204_NO_CONTENT)
async def unmute_user(
    user_id: int,
    current_user: CurrentUserDep,
    service: UserServiceDep,
) -> None:
    await service.unmute(current_user, user_id)


@router.post("/{user_id}/friend", status_code=status.HTTP_204_NO_CONTENT)
async def add_friend(user_id: int, current_user: CurrentUserDep, service: UserServiceDep) -> None:
    await service.add_friend(current_user, user_id)


@router.delete("/{user_id}/friend", status_code=status.HTTP_204_NO_CONTENT)
async def remove_friend(
    user_id: int,
    current_user: CurrentUserDep,
    service: UserServiceDep,
) -> None:
    await service.remove_friend(current_user, user_id)
