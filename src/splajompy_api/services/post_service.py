"""Post feeds, creation, deletion, likes, pins and poll votes."""

from __future__ import annotations

import logging

from splajompy_api.core.errors import ForbiddenError, InvalidInputError, NotFoundError
from splajompy_api.repositories.protocols import LikeRepository, PostRepository, UserRepository
from splajompy_api.schemas import (
    DetailedPost,
    FeedType,
    Page,
    PollAttachment,
    PostCreate,
    PostOut,
    PublicUser,
)

from .enrichment import PostEnrichmentEngine
from .facets import generate_facets
from .feed_resolver import FeedResolver
from .notification_service import NotificationService
from .polls import PollTallyEngine
from .social_graph import SocialGraphGate

logger = logging.getLogger(__name__)


class PostService:
    """Entry point for every post operation exposed over HTTP."""

    def __init__(
        self,
        posts: PostRepository,
        likes: LikeRepository,
        users: UserRepository,
        notifications: NotificationService,
        graph: SocialGraphGate,
        resolver: FeedResolver,
        enrichment: PostEnrichmentEngine,
        polls: PollTallyEngine,
        *,
        max_post_length: int,
    ) -> None:
        self._posts = posts
        self._likes = likes
        self._users = users
        self._notifications = notifications
        self._graph = graph
        self._resolver = resolver
        self._enrichment = enrichment
        self._polls = polls
        self._max_post_length = max_post_length

    async def get_feed(
        self,
        viewer: PublicUser,
        feed_type: FeedType,
        page: Page,
        target_user_id: int | None = None,
    ) -> list[DetailedPost]:
        """Return one enriched page of a feed, newest first."""
        candidates = await self._resolver.resolve(viewer.user_id, feed_type, page, target_user_id)
        detailed = await self._enrichment.enrich(
            viewer.user_id,
            [candidate.post_id for candidate in candidates],
        )
        feed: list[DetailedPost] = []
        for candidate, post in zip(candidates, detailed, strict=True):
            if candidate.relationship_type is not None:
                post = post.model_copy(
                    update={
                        "relationship_type": candidate.relationship_type,
                        "mutual_usernames": candidate.mutual_usernames,
                    }
                )
            feed.append(post)
        return feed

    async def get_post(self, viewer: PublicUser, post_id: int) -> DetailedPost:
        """Return a single post as seen by ``viewer``.

        Raises:
            NotFoundError: If the post does not exist or a block hides its author.
        """
        await self._require_visible_post(viewer, post_id)
        return await self._enrichment.enrich_post(viewer.user_id, post_id)

    async def create_post(self, author: PublicUser, payload: PostCreate) -> PostOut:
        """Store a new post with its mentions, poll and images.

        Raises:
            InvalidInputError: If the text is too long or the post is empty.
        """
        text = payload.text.strip()
        if len(text) > self._max_post_length:
            raise InvalidInputError(f"Post text cannot exceed {self._max_post_length} characters")
        if not text and not payload.images and payload.poll is None:
            raise InvalidInputError("Post must contain text, images or a poll")

        facets = await generate_facets(self._users, text)
        attributes = PollAttachment(poll=payload.poll) if payload.poll is not None else None
        post = await self._posts.insert_post(author.user_id, text, facets, attributes)

        for display_order, image in enumerate(payload.images):
            await self._posts.insert_image(
                post.post_id,
                image.height,
                image.width,
                image.key,
                display_order,
            )

        mentioned = {facet.user_id for facet in facets} - {author.user_id}
        for user_id in sorted(mentioned):
            await self._notifications.notify(
                user_id,
                f"@{author.username} mentioned you in a post.",
                post_id=post.post_id,
            )

        logger.info("User %s created post %s", author.user_id, post.post_id)
        return post

    async def delete_post(self, user: PublicUser, post_id: int) -> None:
        """Delete one of the caller's posts."""
        post = await self._require_post(post_id)
        if post.user_id != user.user_id:
            raise ForbiddenError("You can only delete your own posts")
        await self._posts.delete_post(post_id)
        logger.info("User %s deleted post %s", user.user_id, post_id)

    async def like_post(self, user: PublicUser, post_id: int) -> None:
        """Like a post, notifying its author the first time."""
        post = await self._require_visible_post(user, post_id)
        if await self._likes.is_liked(user.user_id, post_id):
            return
        await self._likes.add_like(user.user_id, post_id)
        if post.user_id != user.user_id:
            await self._notifications.notify(
                post.user_id,
                f"@{user.username} liked your post.",
                post_id=post_id,
            )

    async def unlike_post(self, user: PublicUser, post_id: int) -> None:
        await self._require_visible_post(user, post_id)
        await self._likes.remove_like(user.user_id, post_id)

    async def pin_post(self, user: PublicUser, post_id: int) -> None:
        """Pin one of the caller's posts, replacing any earlier pin."""
        post = await self._require_post(post_id)
        if post.user_id != user.user_id:
            raise ForbiddenError("You can only pin your own posts")
        await self._posts.pin_post(user.user_id, post_id)
        logger.info("User %s pinned post %s", user.user_id, post_id)

    async def unpin_post(self, user: PublicUser) -> None:
        await self._posts.unpin_post(user.user_id)
        logger.info("User %s removed their pinned post", user.user_id)

    async def vote_on_poll(self, user: PublicUser, post_id: int, option_index: int) -> None:
        await self._require_visible_post(user, post_id)
        await self._polls.vote_on_poll(user.user_id, post_id, option_index)

    async def report_post(self, user: PublicUser, post_id: int) -> None:
        """Flag a post for moderation; reporting the same post twice counts once."""
        post = await self._require_visible_post(user, post_id)
        await self._posts.report_post(post_id, user.user_id)
        logger.warning("User %s reported post %s by user %s", user.user_id, post_id, post.user_id)

    async def _require_post(self, post_id: int) -> PostOut:
        post = await self._posts.get_post_by_id(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    async def _require_visible_post(self, viewer: PublicUser, post_id: int) -> PostOut:
        """Return the post, hiding it as missing when a block separates viewer and author."""
        post = await self._require_post(post_id)
        if await self._graph.is_blocked_either_way(viewer.user_id, post.user_id):
            raise NotFoundError("Post not found")
        return post
