"""Resolve which post ids a viewer sees for each feed kind."""

from __future__ import annotations

import logging

from splajompy_api.core.app_version import current_app_version, is_version_at_least
from splajompy_api.core.errors import InvalidInputError
from splajompy_api.repositories.protocols import PostRepository
from splajompy_api.schemas import CursorPage, FeedCandidate, FeedType, Page

from .social_graph import SocialGraphGate

logger = logging.getLogger(__name__)


class FeedResolver:
    """Produce ordered feed candidates ready for enrichment.

    Ordering is reverse chronological and decided entirely by the store. On
    the cursor-paginated profile feed, newer clients also get the author's
    pinned post moved to the top of the first page.
    """

    def __init__(
        self,
        posts: PostRepository,
        graph: SocialGraphGate,
        *,
        min_pinned_post_app_version: str,
    ) -> None:
        self._posts = posts
        self._graph = graph
        self._min_pinned_post_app_version = min_pinned_post_app_version

    async def resolve(
        self,
        viewer_id: int,
        feed_type: FeedType,
        page: Page,
        target_user_id: int | None = None,
    ) -> list[FeedCandidate]:
        """Return the candidates for one page of ``feed_type``.

        Raises:
            InvalidInputError: If a profile feed is requested without a target user.
        """
        if feed_type is FeedType.ALL:
            ids = await self._posts.get_all_post_ids(viewer_id, page)
        elif feed_type is FeedType.FOLLOWING:
            ids = await self._posts.get_post_ids_for_following(viewer_id, page)
        elif feed_type is FeedType.MUTUAL:
            return await self._posts.get_post_ids_for_mutual_feed(viewer_id, page)
        else:
            if target_user_id is None:
                raise InvalidInputError("A user is required for the profile feed")
            ids = await self._resolve_profile(viewer_id, target_user_id, page)
        return [FeedCandidate(post_id=post_id) for post_id in ids]

    async def _resolve_profile(self, viewer_id: int, target_user_id: int, page: Page) -> list[int]:
        if await self._graph.is_blocked_either_way(viewer_id, target_user_id):
            return []
        ids = await self._posts.get_post_ids_for_user(target_user_id, page)
        if not isinstance(page, CursorPage):
            return ids
        if not is_version_at_least(current_app_version(), self._min_pinned_post_app_version):
            return ids
        return await self._reorder_pinned(target_user_id, ids, page)

    async def _reorder_pinned(self, user_id: int, ids: list[int], page: CursorPage) -> list[int]:
        pinned_post_id = await self._posts.get_pinned_post_id(user_id)
        if pinned_post_id is None:
            return ids
        reordered = [post_id for post_id in ids if post_id != pinned_post_id]
        if page.is_first_page:
            reordered.insert(0, pinned_post_id)
        return reordered
