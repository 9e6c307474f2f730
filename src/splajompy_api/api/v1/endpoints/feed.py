# src/splajompy_api/api/v1/endpoints/feed.py
"""Feed endpoints: legacy offset pagination and time-based pagination."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query

from splajompy_api.core.settings import settings
from splajompy_api.schemas import CursorPage, DetailedPost, FeedType, OffsetPage

from ..dependencies import CurrentUserDep, PostServiceDep

router = APIRouter(tags=["feed"])

LimitQuery = Annotated[int, Query(ge=1, le=settings.max_page_limit)]
OffsetQuery = Annotated[int, Query(ge=0)]
BeforeQuery = Annotated[
    datetime | None,
    Query(description="RFC 3339 timestamp; only posts created before it are returned"),
]


@router.get("/posts/all", response_model=list[DetailedPost])
async def get_all_posts(
    current_user: CurrentUserDep,
    service: PostServiceDep,
    limit: LimitQuery = settings.default_page_limit,
    offset: OffsetQuery = 0,
) -> list[DetailedPost]:
    """Return every visible post, newest first."""
    page = OffsetPage(limit=limit, offset=offset)
    return await service.get_feed(current_user, FeedType.ALL, page)


@router.get("/posts/following", response_model=list[DetailedPost])
async def get_following_posts(
    current_user: CurrentUserDep,
    service: PostServiceDep,
    limit: LimitQuery = settings.default_page_limit,
    offset: OffsetQuery = 0,
) -> list[DetailedPost]:
    """Return posts by followed users and the caller."""
    page = OffsetPage(limit=limit, offset=offset)
    return await service.get_feed(current_user, FeedType.FOLLOWING, page)


@router.get("/posts/mutual", response_model=list[DetailedPost])
async def get_mutual_posts(
    current_user: CurrentUserDep,
    service: PostServiceDep,
    limit: LimitQuery = settings.default_page_limit,
    offset: OffsetQuery = 0,
) -> list[DetailedPost]:
    """Return posts by friends and friends of followed users."""
    page = OffsetPage(limit=limit, offset=offset)
    return await service.get_feed(current_user, FeedType.MUTUAL, page)


@router.get("/posts/user/{user_id}", response_model=list[DetailedPost])
async def get_user_posts(
    user_id: int,
    current_user: CurrentUserDep,
    service: PostServiceDep,
    limit: LimitQuery = settings.default_page_limit,
    offset: OffsetQuery = 0,
) -> list[DetailedPost]:
    """Return posts authored by one user."""
    page = OffsetPage(limit=limit, offset=offset)
    return await service.get_feed(current_user, FeedType.PROFILE, page, target_user_id=user_id)


@router.get("/v2/posts/all", response_model=list[DetailedPost])
async def get_all_posts_before(
    current_user: CurrentUserDep,
    service: PostServiceDep,
    limit: LimitQuery = settings.default_page_limit,
    before: BeforeQuery = None,
) -> list[DetailedPost]:
    page = CursorPage(limit=limit, before=before)
    return await service.get_feed(current_user, FeedType.ALL, page)


@router.get("/v2/posts/following", response_model=list[DetailedPost])
async def get_following_posts_before(
    current_user: CurrentUserDep,
    service: PostServiceDep,
    limit: LimitQuery = settings.default_page_limit,
    before: BeforeQuery = None,
) -> list[DetailedPost]:
    page = CursorPage(limit=limit, before=before)
    return await service.get_feed(current_user, FeedType.FOLLOWING, page)


@router.get("/v2/posts/mutual", response_model=list[DetailedPost])
async def get_mutual_posts_before(
    current_user: CurrentUserDep,
    service: PostServiceDep,
    limit: LimitQuery = settings.default_page_limit,
    before: BeforeQuery = None,
) -> list[DetailedPost]:
    page = CursorPage(limit=limit, before=before)
    return await service.get_feed(current_user, FeedType.MUTUAL, page)


@router.get("/v2/posts/user/{user_id}", response_model=list[DetailedPost])
async def get_user_posts_before(
    user_id: int,
    current_user: CurrentUserDep,
    service: PostServiceDep,
    limit: LimitQuery = settings.default_page_limit,
    before: BeforeQuery = None,
) -> list[DetailedPost]:
    """Return one user's posts; newer clients get the pinned post first."""
    page = CursorPage(limit=limit, before=before)
    return await service.get_feed(current_user, FeedType.PROFILE, page, target_user_id=user_id)
