"""Deterministic sampling of followed users who liked a post.

Each (post, liker) pair gets a stable pseudo-random score from a splitmix64
hash, so a viewer sees the same sample on every refresh while different posts
surface different likers.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from splajompy_api.repositories.protocols import LikeRepository
from splajompy_api.schemas import RelevantLike

MAX_RELEVANT_LIKES = 2

_MASK64 = (1 << 64) - 1


def splitmix64(value: int) -> int:
    """Return the splitmix64 finalizer of ``value`` as an unsigned 64-bit int."""
    z = (value + 0x9E3779B97F4A7C15) & _MASK64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
    return z ^ (z >> 31)


def seeded_score(post_id: int, user_id: int) -> float:
    """Return a stable score in ``[0, 1)`` for ``user_id`` on ``post_id``."""
    mixed = splitmix64(splitmix64(post_id & _MASK64) ^ (user_id & _MASK64))
    # Top 53 bits fit a float mantissa exactly.
    return (mixed >> 11) / float(1 << 53)


def sample_relevant_likes(
    post_id: int,
    likers: Sequence[RelevantLike],
    limit: int = MAX_RELEVANT_LIKES,
) -> list[RelevantLike]:
    """Pick up to ``limit`` likers ordered by score, ties broken by user id."""
    ranked = sorted(likers, key=lambda like: (seeded_score(post_id, like.user_id), like.user_id))
    return ranked[:limit]


@dataclass
class RelevantLikesSample:
    likes: list[RelevantLike] = field(default_factory=list)
    has_other_likes: bool = False


class RelevantLikesSampler:
    """Select the followed likers shown under a post."""

    def __init__(self, likes: LikeRepository) -> None:
        self._likes = likes

    async def sample(self, viewer_id: int, post_id: int) -> RelevantLikesSample:
        """Return the sampled likers and whether anyone else liked the post.

        ``has_other_likes`` ignores the viewer and the sampled likers.
        """
        likers = await self._likes.get_post_likes_from_followed(post_id, viewer_id)
        sampled = sample_relevant_likes(post_id, likers)
        excluded = [like.user_id for like in sampled]
        excluded.append(viewer_id)
        has_other_likes = await self._likes.has_likes_from_others(post_id, excluded)
        return RelevantLikesSample(likes=sampled, has_other_likes=has_other_likes)
