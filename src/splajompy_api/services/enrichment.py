"""Concurrent, order-preserving assembly of viewer-relative posts."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from splajompy_api.core.app_version import current_app_version
from splajompy_api.core.errors import NotFoundError
from splajompy_api.repositories.protocols import LikeRepository, PostRepository, UserRepository
from splajompy_api.schemas import DetailedPost, ImageOut

from .polls import PollTallyEngine
from .relevant_likes import RelevantLikesSampler
from .storage import ObjectUrlResolver
from .version_shim import render_post_text

logger = logging.getLogger(__name__)


class PostEnrichmentEngine:
    """Turn post ids into ``DetailedPost`` objects for one viewer.

    One task per post runs inside a task group. The first failure cancels the
    remaining tasks and is re-raised; callers never see a partial page.
    """

    def __init__(
        self,
        posts: PostRepository,
        likes: LikeRepository,
        users: UserRepository,
        url_resolver: ObjectUrlResolver,
        sampler: RelevantLikesSampler,
        polls: PollTallyEngine,
        *,
        min_poll_app_version: str,
    ) -> None:
        self._posts = posts
        self._likes = likes
        self._users = users
        self._url_resolver = url_resolver
        self._sampler = sampler
        self._polls = polls
        self._min_poll_app_version = min_poll_app_version

    async def enrich(self, viewer_id: int, post_ids: Sequence[int]) -> list[DetailedPost]:
        """Return one ``DetailedPost`` per id, in the same order as ``post_ids``."""
        results: list[DetailedPost | None] = [None] * len(post_ids)

        async def fill(index: int, post_id: int) -> None:
            results[index] = await self.enrich_post(viewer_id, post_id)

        try:
            async with asyncio.TaskGroup() as group:
                for index, post_id in enumerate(post_ids):
                    group.create_task(fill(index, post_id))
        except ExceptionGroup as exc_group:
            raise exc_group.exceptions[0] from None

        return [detailed for detailed in results if detailed is not None]

    async def enrich_post(self, viewer_id: int, post_id: int) -> DetailedPost:
        """Assemble the viewer-relative view of a single post.

        Raises:
            NotFoundError: If the post or its author no longer exists.
        """
        try:
            return await self._build(viewer_id, post_id)
        except Exception:
            logger.warning("Failed to enrich post %s for user %s", post_id, viewer_id)
            raise

    async def _build(self, viewer_id: int, post_id: int) -> DetailedPost:
        post = await self._posts.get_post_by_id(post_id)
        if post is None:
            raise NotFoundError("Post not found")

        author = await self._users.get_user_by_id(post.user_id)
        if author is None:
            raise NotFoundError("User not found")

        is_liked = await self._likes.is_liked(viewer_id, post_id)
        stored_images = await self._posts.get_images_for_post(post_id)
        images = [self._resolve_image(image) for image in stored_images]
        comment_count = await self._posts.get_comment_count_for_post(post_id)
        sample = await self._sampler.sample(viewer_id, post_id)
        pinned_post_id = await self._posts.get_pinned_post_id(post.user_id)

        detailed_poll = None
        poll = post.poll
        if poll is not None:
            detailed_poll = await self._polls.get_poll_details(viewer_id, post_id, poll)
            text = render_post_text(
                post.text,
                has_poll=True,
                app_version=current_app_version(),
                minimum=self._min_poll_app_version,
            )
            post = post.model_copy(update={"text": text})

        return DetailedPost(
            post=post,
            user=author,
            is_liked=is_liked,
            comment_count=comment_count,
            images=images,
            relevant_likes=sample.likes,
            has_other_likes=sample.has_other_likes,
            poll=detailed_poll,
            is_pinned=pinned_post_id == post_id,
        )

    def _resolve_image(self, image: ImageOut) -> ImageOut:
        return image.model_copy(
            update={"image_blob_url": self._url_resolver.get_object_url(image.image_blob_url)}
        )
