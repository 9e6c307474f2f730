"""Shared API dependencies for authentication and service construction."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from splajompy_api.core.security import decode_access_token
from splajompy_api.core.settings import settings
from splajompy_api.db.session import get_sessionmaker
from splajompy_api.repositories import (
    SqlCommentRepository,
    SqlLikeRepository,
    SqlNotificationRepository,
    SqlPostRepository,
    SqlUserRepository,
    SqlWrappedRepository,
)
from splajompy_api.schemas import PublicUser
from splajompy_api.services.comment_service import CommentService
from splajompy_api.services.enrichment import PostEnrichmentEngine
from splajompy_api.services.feed_resolver import FeedResolver
from splajompy_api.services.notification_service import NotificationService
from splajompy_api.services.polls import PollTallyEngine
from splajompy_api.services.post_service import PostService
from splajompy_api.services.relevant_likes import RelevantLikesSampler
from splajompy_api.services.social_graph import SocialGraphGate
from splajompy_api.services.storage import ObjectUrlResolver
from splajompy_api.services.user_service import UserService
from splajompy_api.services.wrapped_service import WrappedService

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for the session factory dependency
SessionmakerDep = Annotated[async_sessionmaker[AsyncSession], Depends(get_sessionmaker)]


@lru_cache
def get_url_resolver() -> ObjectUrlResolver:
    """Return the object URL resolver built from the storage settings."""
    return ObjectUrlResolver(settings.storage_config)


UrlResolverDep = Annotated[ObjectUrlResolver, Depends(get_url_resolver)]


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    sessionmaker: SessionmakerDep,
) -> PublicUser:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        sessionmaker: Session factory for the user lookup

    Returns:
        Public profile of the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    try:
        user_id = decode_access_token(credentials.credentials)
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    user = await SqlUserRepository(sessionmaker).get_user_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[PublicUser, Depends(get_current_user)]


def get_notification_service(sessionmaker: SessionmakerDep) -> NotificationService:
    """Build the notification service for one request."""
    return NotificationService(
        SqlNotificationRepository(sessionmaker),
        SqlUserRepository(sessionmaker),
    )


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


def _enrichment_engine(
    posts: SqlPostRepository,
    likes: SqlLikeRepository,
    users: SqlUserRepository,
    url_resolver: ObjectUrlResolver,
    polls: PollTallyEngine,
) -> PostEnrichmentEngine:
    return PostEnrichmentEngine(
        posts,
        likes,
        users,
        url_resolver,
        RelevantLikesSampler(likes),
        polls,
        min_poll_app_version=settings.min_poll_app_version,
    )


def get_post_service(
    sessionmaker: SessionmakerDep,
    url_resolver: UrlResolverDep,
    notifications: NotificationServiceDep,
) -> PostService:
    """Wire the feed, enrichment and poll components into a post service."""
    posts = SqlPostRepository(sessionmaker)
    likes = SqlLikeRepository(sessionmaker)
    users = SqlUserRepository(sessionmaker)
    graph = SocialGraphGate(users)
    polls = PollTallyEngine(posts, users, notifications)
    resolver = FeedResolver(
        posts,
        graph,
        min_pinned_post_app_version=settings.min_pinned_post_app_version,
    )
    enrichment = _enrichment_engine(posts, likes, users, url_resolver, polls)
    return PostService(
        posts,
        likes,
        users,
        notifications,
        graph,
        resolver,
        enrichment,
        polls,
        max_post_length=settings.max_post_length,
    )


def get_user_service(
    sessionmaker: SessionmakerDep,
    notifications: NotificationServiceDep,
) -> UserService:
    """Build the user service for one request."""
    users = SqlUserRepository(sessionmaker)
    return UserService(users, SocialGraphGate(users), notifications)


def get_comment_service(
    sessionmaker: SessionmakerDep,
    notifications: NotificationServiceDep,
) -> CommentService:
    """Build the comment service for one request."""
    users = SqlUserRepository(sessionmaker)
    return CommentService(
        SqlCommentRepository(sessionmaker),
        SqlPostRepository(sessionmaker),
        SqlLikeRepository(sessionmaker),
        users,
        notifications,
        SocialGraphGate(users),
    )


def get_wrapped_service(
    sessionmaker: SessionmakerDep,
    url_resolver: UrlResolverDep,
    notifications: NotificationServiceDep,
) -> WrappedService:
    """Build the year-in-review service for one request."""
    posts = SqlPostRepository(sessionmaker)
    likes = SqlLikeRepository(sessionmaker)
    users = SqlUserRepository(sessionmaker)
    polls = PollTallyEngine(posts, users, notifications)
    return WrappedService(
        SqlWrappedRepository(sessionmaker),
        posts,
        users,
        _enrichment_engine(posts, likes, users, url_resolver, polls),
        polls,
    )


PostServiceDep = Annotated[PostService, Depends(get_post_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
WrappedServiceDep = Annotated[WrappedService, Depends(get_wrapped_service)]
