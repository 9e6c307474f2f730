"""Year-in-review summary assembled on demand from yearly aggregates."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import UTC, date, datetime, timedelta

from splajompy_api.core.errors import NotFoundError
from splajompy_api.db.time import as_utc, utcnow
from splajompy_api.repositories.protocols import (
    PostRepository,
    UserRepository,
    WrappedRepository,
)
from splajompy_api.schemas import (
    ActivityData,
    ComparativePostStatistics,
    DetailedPoll,
    DetailedPost,
    FavoriteUser,
    PublicUser,
    SliceData,
    WrappedData,
)

from .enrichment import PostEnrichmentEngine
from .polls import PollTallyEngine

logger = logging.getLogger(__name__)

# Weights used for the "share of the site" slice.
POST_WEIGHT = 1.0
COMMENT_WEIGHT = 0.2
LIKE_WEIGHT = 0.05

# Each comment on someone's post counts as much as three likes.
COMMENT_AFFINITY = 3.0
FAVORITE_USER_LIMIT = 5

# Accounts created on or after this day of the summarised year get no summary.
ELIGIBILITY_CUTOFF = (12, 25)


class WrappedService:
    """Build a user's year-in-review."""

    def __init__(
        self,
        wrapped: WrappedRepository,
        posts: PostRepository,
        users: UserRepository,
        enrichment: PostEnrichmentEngine,
        polls: PollTallyEngine,
    ) -> None:
        self._wrapped = wrapped
        self._posts = posts
        self._users = users
        self._enrichment = enrichment
        self._polls = polls

    async def is_eligible(self, user: PublicUser, year: int) -> bool:
        """Return True if ``user`` gets a summary for ``year``.

        The account must predate the cutoff, and the user must have posted
        during the year and received at least one like from someone else.
        """
        start, end = year_bounds(year)
        cutoff = datetime(year, *ELIGIBILITY_CUTOFF, tzinfo=UTC)
        if as_utc(user.created_at) >= cutoff:
            return False
        if not await self._wrapped.has_post(user.user_id, start, end):
            return False
        return await self._wrapped.has_received_like(user.user_id, start, end)

    async def get_wrapped(self, user: PublicUser, year: int) -> WrappedData:
        """Return the summary of ``year`` for ``user``.

        Raises:
            NotFoundError: If the user is not eligible for that year.
        """
        if not await self.is_eligible(user, year):
            raise NotFoundError("No year in review available")

        start, end = year_bounds(year)
        timestamps = await self._wrapped.get_activity_timestamps(user.user_id, start, end)
        texts = await self._wrapped.get_texts(user.user_id, start, end)
        data = WrappedData(
            year=year,
            activity_data=build_activity(year, timestamps),
            weekly_activity=build_weekly_activity(timestamps),
            slice_data=await self._slice(user.user_id, start, end),
            comparative_post_statistics=await self._comparison(user.user_id, start, end),
            most_liked_post=await self._most_liked_post(user.user_id, start, end),
            favorite_users=await self._favorite_users(user.user_id, start, end),
            controversial_poll=await self._controversial_poll(user.user_id, start, end),
            total_word_count=sum(len(text.split()) for text in texts),
            generated_utc=utcnow(),
        )
        logger.info("Built %s year in review for user %s", year, user.user_id)
        return data

    async def _slice(self, user_id: int, start: datetime, end: datetime) -> SliceData:
        site = await self._wrapped.get_content_totals(start, end)
        mine = await self._wrapped.get_content_totals(start, end, user_id)
        total = (
            site.posts * POST_WEIGHT + site.comments * COMMENT_WEIGHT + site.likes * LIKE_WEIGHT
        )
        if total == 0:
            return SliceData()

        def share(weight: float) -> float:
            return weight / total * 100

        post_part = share(mine.posts * POST_WEIGHT)
        comment_part = share(mine.comments * COMMENT_WEIGHT)
        like_part = share(mine.likes * LIKE_WEIGHT)
        return SliceData(
            percent=post_part + comment_part + like_part,
            post_component=post_part,
            comment_component=comment_part,
            like_component=like_part,
        )

    async def _comparison(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> ComparativePostStatistics:
        length = await self._wrapped.get_average_post_length(start, end, user_id)
        site_length = await self._wrapped.get_average_post_length(start, end)
        images = await self._wrapped.get_average_image_count(start, end, user_id)
        site_images = await self._wrapped.get_average_image_count(start, end)
        return ComparativePostStatistics(
            post_length_variation=length - site_length,
            image_count_variation=images - site_images,
        )

    async def _most_liked_post(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> DetailedPost | None:
        post_id = await self._wrapped.get_most_liked_post_id(user_id, start, end)
        if post_id is None:
            return None
        return await self._enrichment.enrich_post(user_id, post_id)

    async def _favorite_users(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> list[FavoriteUser]:
        """Rank people by likes and comments the user gave them.

        Likes are normalised by how much the other person posted or commented,
        so a like on a rare poster weighs more than one on a prolific poster.
        """
        weights: Counter[int] = Counter()
        post_likes = await self._wrapped.get_post_likes_given(user_id, start, end)
        comment_likes = await self._wrapped.get_comment_likes_given(user_id, start, end)
        for other_id in post_likes.keys() | comment_likes.keys():
            totals = await self._wrapped.get_content_totals(start, end, other_id)
            if other_id in post_likes:
                weights[other_id] += post_likes[other_id] / max(totals.posts, 1)
            if other_id in comment_likes:
                weights[other_id] += comment_likes[other_id] / max(totals.comments, 1)
        comments = await self._wrapped.get_comments_given(user_id, start, end)
        for other_id, count in comments.items():
            weights[other_id] += count * COMMENT_AFFINITY

        ranked = sorted(weights.items(), key=lambda item: (-item[1], item[0]))
        top_weight = ranked[0][1] if ranked else 0.0
        favorites: list[FavoriteUser] = []
        for other_id, weight in ranked[:FAVORITE_USER_LIMIT]:
            other = await self._users.get_user_by_id(other_id)
            if other is None:
                continue
            proportion = weight / top_weight * 100 if top_weight > 0 else 0.0
            favorites.append(FavoriteUser(user=other, proportion=proportion))
        return favorites

    async def _controversial_poll(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
    ) -> DetailedPoll | None:
        """Return the poll where the user's choice had the smallest share of votes."""
        chosen: DetailedPoll | None = None
        lowest_share = 1.0
        for post_id in await self._wrapped.get_voted_poll_post_ids(user_id, start, end):
            post = await self._posts.get_post_by_id(post_id)
            if post is None or post.poll is None:
                continue
            details = await self._polls.get_poll_details(user_id, post_id, post.poll)
            if details.current_user_vote is None or details.vote_total == 0:
                continue
            share = details.options[details.current_user_vote].vote_total / details.vote_total
            if chosen is None or share < lowest_share:
                chosen, lowest_share = details, share
        return chosen


def year_bounds(year: int) -> tuple[datetime, datetime]:
    """Return the UTC half-open range covering ``year``."""
    return datetime(year, 1, 1, tzinfo=UTC), datetime(year + 1, 1, 1, tzinfo=UTC)


def build_activity(year: int, timestamps: list[datetime]) -> ActivityData:
    """Count actions per UTC day; every day of the year is present."""
    counts: dict[str, int] = {}
    day = date(year, 1, 1)
    while day.year == year:
        counts[day.isoformat()] = 0
        day += timedelta(days=1)
    for timestamp in timestamps:
        key = as_utc(timestamp).date().isoformat()
        if key in counts:
            counts[key] += 1

    ceiling = max(counts.values(), default=0)
    most_active = None
    if ceiling > 0:
        most_active = next(key for key, count in counts.items() if count == ceiling)
    return ActivityData(
        activity_count_ceiling=ceiling,
        counts=counts,
        most_active_day=most_active,
    )


def build_weekly_activity(timestamps: list[datetime]) -> list[int]:
    """Return Sunday-first weekday totals scaled so the busiest weekday is 100."""
    weekly = [0] * 7
    for timestamp in timestamps:
        weekly[(as_utc(timestamp).weekday() + 1) % 7] += 1
    peak = max(max(weekly), 1)
    return [100 * count // peak for count in weekly]
