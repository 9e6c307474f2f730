"""Comments on posts and likes on comments."""

from __future__ import annotations

import logging

from splajompy_api.core.errors import InvalidInputError, NotFoundError
from splajompy_api.repositories.protocols import (
    CommentRepository,
    LikeRepository,
    PostRepository,
    UserRepository,
)
from splajompy_api.schemas import CommentOut, DetailedComment, PostOut, PublicUser

from .facets import generate_facets
from .notification_service import NotificationService
from .social_graph import SocialGraphGate

logger = logging.getLogger(__name__)


class CommentService:
    """Add, list and like comments."""

    def __init__(
        self,
        comments: CommentRepository,
        posts: PostRepository,
        likes: LikeRepository,
        users: UserRepository,
        notifications: NotificationService,
        graph: SocialGraphGate,
    ) -> None:
        self._comments = comments
        self._posts = posts
        self._likes = likes
        self._users = users
        self._notifications = notifications
        self._graph = graph

    async def add_comment(self, author: PublicUser, post_id: int, text: str) -> DetailedComment:
        """Comment on a post and notify the post's author."""
        post = await self._require_visible_post(author, post_id)
        text = text.strip()
        if not text:
            raise InvalidInputError("Comment cannot be empty")
        facets = await generate_facets(self._users, text)
        comment = await self._comments.add_comment(post_id, author.user_id, text, facets)

        if post.user_id != author.user_id:
            await self._notifications.notify(
                post.user_id,
                f"@{author.username} commented on your post.",
                post_id=post_id,
                comment_id=comment.comment_id,
            )
        return DetailedComment(**comment.model_dump(), user=author, is_liked=False)

    async def get_comments(self, viewer: PublicUser, post_id: int) -> list[DetailedComment]:
        """Return a post's comments, oldest first.

        Comments by users on the other side of a block are left out.
        """
        await self._require_visible_post(viewer, post_id)
        detailed: list[DetailedComment] = []
        for comment in await self._comments.get_comments_for_post(post_id):
            if await self._graph.is_blocked_either_way(viewer.user_id, comment.user_id):
                continue
            author = await self._users.get_user_by_id(comment.user_id)
            if author is None:
                raise NotFoundError("User not found")
            is_liked = await self._likes.is_liked(viewer.user_id, post_id, comment.comment_id)
            detailed.append(DetailedComment(**comment.model_dump(), user=author, is_liked=is_liked))
        return detailed

    async def like_comment(self, user: PublicUser, post_id: int, comment_id: int) -> None:
        comment = await self._require_comment(user, post_id, comment_id)
        await self._likes.add_like(user.user_id, post_id, comment.comment_id)

    async def unlike_comment(self, user: PublicUser, post_id: int, comment_id: int) -> None:
        comment = await self._require_comment(user, post_id, comment_id)
        await self._likes.remove_like(user.user_id, post_id, comment.comment_id)

    async def _require_visible_post(self, viewer: PublicUser, post_id: int) -> PostOut:
        post = await self._posts.get_post_by_id(post_id)
        if post is None or await self._graph.is_blocked_either_way(viewer.user_id, post.user_id):
            raise NotFoundError("Post not found")
        return post

    async def _require_comment(
        self,
        viewer: PublicUser,
        post_id: int,
        comment_id: int,
    ) -> CommentOut:
        await self._require_visible_post(viewer, post_id)
        comment = await self._comments.get_comment_by_id(comment_id)
        if comment is None or comment.post_id != post_id:
            raise NotFoundError("Comment not found")
        if await self._graph.is_blocked_either_way(viewer.user_id, comment.user_id):
            raise NotFoundError("Comment not found")
        return comment
