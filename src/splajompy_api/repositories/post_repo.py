"""Data access helpers for working with posts."""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import aliased

from splajompy_api.db.time import as_utc, utcnow
from splajompy_api.db.upsert import upsert_statement
from splajompy_api.models import (
    Block,
    Comment,
    Follow,
    Image,
    Like,
    Mute,
    Notification,
    PinnedPost,
    PollVote,
    Post,
    PostReport,
    User,
    UserRelationship,
)
from splajompy_api.schemas import (
    CursorPage,
    Facet,
    FeedCandidate,
    ImageOut,
    Page,
    PollAttachment,
    PostOut,
)

__all__ = ["SqlPostRepository", "visible_author_conditions", "paginate_posts"]


def visible_author_conditions(viewer_id: int) -> list[Any]:
    """Return WHERE clauses hiding authors blocked either way or muted by the viewer."""
    blocked_by_viewer = select(Block.target_user_id).where(Block.user_id == viewer_id)
    blocking_viewer = select(Block.user_id).where(Block.target_user_id == viewer_id)
    muted_by_viewer = select(Mute.target_user_id).where(Mute.user_id == viewer_id)
    return [
        Post.user_id.not_in(blocked_by_viewer),
        Post.user_id.not_in(blocking_viewer),
        Post.user_id.not_in(muted_by_viewer),
    ]


def paginate_posts(stmt: Select[Any], page: Page) -> Select[Any]:
    """Apply offset or cursor ordering and limits to a post query."""
    if isinstance(page, CursorPage):
        if page.before is not None:
            stmt = stmt.where(Post.created_at < as_utc(page.before))
        return stmt.order_by(Post.created_at.desc(), Post.post_id.desc()).limit(page.limit)
    return stmt.order_by(Post.post_id.desc()).limit(page.limit).offset(page.offset)


class SqlPostRepository:
    """Post persistence backed by SQLAlchemy.

    Every method opens its own session so that concurrent callers never share
    one.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository with an async session factory."""
        self._sessionmaker = sessionmaker

    async def insert_post(
        self,
        user_id: int,
        text: str,
        facets: Sequence[Facet],
        attributes: PollAttachment | None,
    ) -> PostOut:
        """Insert a new post and return it."""
        post = Post(
            user_id=user_id,
            text=text,
            facets=[facet.model_dump() for facet in facets],
            attributes=attributes.model_dump() if attributes is not None else None,
        )
        async with self._sessionmaker.begin() as session:
            session.add(post)
            await session.flush()
            return PostOut.model_validate(post)

    async def delete_post(self, post_id: int) -> None:
        """Delete a post together with rows that reference it."""
        async with self._sessionmaker.begin() as session:
            # SQLite only honours ON DELETE CASCADE with foreign keys enabled.
            await session.execute(delete(Notification).where(Notification.post_id == post_id))
            await session.execute(delete(Like).where(Like.post_id == post_id))
            await session.execute(delete(Comment).where(Comment.post_id == post_id))
            await session.execute(delete(PinnedPost).where(PinnedPost.post_id == post_id))
            await session.execute(delete(PollVote).where(PollVote.post_id == post_id))
            await session.execute(delete(PostReport).where(PostReport.post_id == post_id))
            await session.execute(delete(Image).where(Image.post_id == post_id))
            await session.execute(delete(Post).where(Post.post_id == post_id))

    async def get_post_by_id(self, post_id: int) -> PostOut | None:
        """Return a post by identifier."""
        async with self._sessionmaker() as session:
            post = await session.get(Post, post_id)
            if post is None:
                return None
            return PostOut.model_validate(post)

    async def get_images_for_post(self, post_id: int) -> list[ImageOut]:
        """Return a post's images in display order."""
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(Image)
                .where(Image.post_id == post_id)
                .order_by(Image.display_order, Image.image_id)
            )
            return [ImageOut.model_validate(image) for image in result.scalars()]

    async def insert_image(
        self,
        post_id: int,
        height: int,
        width: int,
        image_blob_url: str,
        display_order: int,
    ) -> ImageOut:
        """Attach an uploaded image (by storage key) to a post."""
        image = Image(
            post_id=post_id,
            height=height,
            width=width,
            image_blob_url=image_blob_url,
            display_order=display_order,
        )
        async with self._sessionmaker.begin() as session:
            session.add(image)
            await session.flush()
            return ImageOut.model_validate(image)

    async def get_comment_count_for_post(self, post_id: int) -> int:
        """Return the number of comments on a post."""
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(func.count()).select_from(Comment).where(Comment.post_id == post_id)
            )
            return int(result.scalar_one())

    async def get_all_post_ids(self, viewer_id: int, page: Page) -> list[int]:
        """Return ids of every post the viewer may see."""
        stmt = select(Post.post_id).where(*visible_author_conditions(viewer_id))
        return await self._fetch_ids(paginate_posts(stmt, page))

    async def get_post_ids_for_following(self, viewer_id: int, page: Page) -> list[int]:
        """Return ids of posts by followed users and by the viewer."""
        followed = select(Follow.following_id).where(Follow.follower_id == viewer_id)
        stmt = select(Post.post_id).where(
            (Post.user_id == viewer_id) | Post.user_id.in_(followed),
            *visible_author_conditions(viewer_id),
        )
        return await self._fetch_ids(paginate_posts(stmt, page))

    async def get_post_ids_for_user(self, user_id: int, page: Page) -> list[int]:
        """Return ids of posts authored by ``user_id``."""
        stmt = select(Post.post_id).where(Post.user_id == user_id)
        return await self._fetch_ids(paginate_posts(stmt, page))

    async def get_post_ids_for_mutual_feed(
        self,
        viewer_id: int,
        page: Page,
    ) -> list[FeedCandidate]:
        """Return posts by friends and by users followed by the viewer's followees.

        Friends are tagged ``"friend"``; everyone else is tagged ``"mutual"``
        and carries the usernames of the followees that connect them.
        """
        direct = aliased(Follow)
        second = aliased(Follow)
        friends = select(UserRelationship.target_user_id).where(
            UserRelationship.user_id == viewer_id
        )
        second_degree = (
            select(second.following_id)
            .join(direct, second.follower_id == direct.following_id)
            .where(direct.follower_id == viewer_id)
        )
        stmt = select(Post.post_id, Post.user_id).where(
            Post.user_id != viewer_id,
            Post.user_id.in_(friends) | Post.user_id.in_(second_degree),
            *visible_author_conditions(viewer_id),
        )

        async with self._sessionmaker() as session:
            rows = (await session.execute(paginate_posts(stmt, page))).all()
            if not rows:
                return []
            author_ids = {row.user_id for row in rows}

            friend_result = await session.execute(
                select(UserRelationship.target_user_id).where(
                    UserRelationship.user_id == viewer_id,
                    UserRelationship.target_user_id.in_(author_ids),
                )
            )
            friend_ids = set(friend_result.scalars())

            connector_result = await session.execute(
                select(second.following_id, User.username)
                .join(direct, second.follower_id == direct.following_id)
                .join(User, User.user_id == direct.following_id)
                .where(
                    direct.follower_id == viewer_id,
                    second.following_id.in_(author_ids - friend_ids),
                )
            )
            connectors: dict[int, set[str]] = defaultdict(set)
            for author_id, username in connector_result.all():
                connectors[author_id].add(username)

        candidates: list[FeedCandidate] = []
        for row in rows:
            if row.user_id in friend_ids:
                candidates.append(FeedCandidate(post_id=row.post_id, relationship_type="friend"))
            else:
                candidates.append(
                    FeedCandidate(
                        post_id=row.post_id,
                        relationship_type="mutual",
                        mutual_usernames=sorted(connectors[row.user_id]),
                    )
                )
        return candidates

    async def get_pinned_post_id(self, user_id: int) -> int | None:
        """Return the id of the user's pinned post, if any."""
        async with self._sessionmaker() as session:
            pinned = await session.get(PinnedPost, user_id)
            return pinned.post_id if pinned is not None else None

    async def pin_post(self, user_id: int, post_id: int) -> None:
        """Pin a post, replacing any previous pin."""
        async with self._sessionmaker.begin() as session:
            await session.execute(
                upsert_statement(
                    session,
                    PinnedPost,
                    {"user_id": user_id, "post_id": post_id, "pinned_at": utcnow()},
                    conflict_columns=["user_id"],
                    update_columns=["post_id", "pinned_at"],
                )
            )

    async def unpin_post(self, user_id: int) -> None:
        """Remove the user's pin, if any."""
        async with self._sessionmaker.begin() as session:
            await session.execute(delete(PinnedPost).where(PinnedPost.user_id == user_id))

    async def get_user_vote_in_poll(self, post_id: int, user_id: int) -> int | None:
        """Return the option index the user voted for, or None."""
        async with self._sessionmaker() as session:
            vote = await session.get(PollVote, (post_id, user_id))
            return vote.option_index if vote is not None else None

    async def get_poll_votes_grouped(self, post_id: int) -> dict[int, int]:
        """Return vote counts keyed by option index."""
        async with self._sessionmaker() as session:
            result = await session.execute(
                select(PollVote.option_index, func.count())
                .where(PollVote.post_id == post_id)
                .group_by(PollVote.option_index)
            )
            return {int(option): int(count) for option, count in result.all()}

    async def insert_vote(self, post_id: int, user_id: int, option_index: int) -> None:
        """Record a vote, overwriting any earlier vote by the same user."""
        async with self._sessionmaker.begin() as session:
            await session.execute(
                upsert_statement(
                    session,
                    PollVote,
                    {"post_id": post_id, "user_id": user_id, "option_index": option_index},
                    conflict_columns=["post_id", "user_id"],
                    update_columns=["option_index"],
                )
            )

    async def report_post(self, post_id: int, reporter_id: int) -> None:
        """Record a report; repeat reports by the same user are ignored."""
        async with self._sessionmaker.begin() as session:
            await session.execute(
                upsert_statement(
                    session,
                    PostReport,
                    {"post_id": post_id, "reporter_id": reporter_id},
                    conflict_columns=["post_id", "reporter_id"],
                )
            )

    async def _fetch_ids(self, stmt: Select[Any]) -> list[int]:
        async with self._sessionmaker() as session:
            result = await session.execute(stmt)
            return [int(post_id) for post_id in result.scalars()]
