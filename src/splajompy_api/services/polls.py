"""Poll tallies and vote casting."""

from __future__ import annotations

import logging

from splajompy_api.core.errors import InvalidInputError, NotFoundError
from splajompy_api.repositories.protocols import PostRepository, UserRepository
from splajompy_api.schemas import DetailedPoll, Poll, PollOptionDetail

from .notification_service import NotificationService

logger = logging.getLogger(__name__)


def tally_poll(
    poll: Poll,
    grouped_votes: dict[int, int],
    current_user_vote: int | None,
) -> DetailedPoll:
    """Build a dense tally with one entry per option.

    Counts recorded for indexes outside the option range are ignored.
    """
    options = [
        PollOptionDetail(title=title, vote_total=grouped_votes.get(index, 0))
        for index, title in enumerate(poll.options)
    ]
    return DetailedPoll(
        title=poll.title,
        vote_total=sum(option.vote_total for option in options),
        current_user_vote=current_user_vote,
        options=options,
    )


class PollTallyEngine:
    """Read poll results and record votes."""

    def __init__(
        self,
        posts: PostRepository,
        users: UserRepository,
        notifications: NotificationService,
    ) -> None:
        self._posts = posts
        self._users = users
        self._notifications = notifications

    async def get_poll_details(self, viewer_id: int, post_id: int, poll: Poll) -> DetailedPoll:
        """Return the poll tally and the viewer's own vote."""
        current_user_vote = await self._posts.get_user_vote_in_poll(post_id, viewer_id)
        grouped = await self._posts.get_poll_votes_grouped(post_id)
        return tally_poll(poll, grouped, current_user_vote)

    async def vote_on_poll(self, voter_id: int, post_id: int, option_index: int) -> None:
        """Record ``voter_id``'s choice, replacing any earlier vote.

        Raises:
            NotFoundError: If the post does not exist.
            InvalidInputError: If the post has no poll or the option is out of range.
        """
        post = await self._posts.get_post_by_id(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        poll = post.poll
        if poll is None:
            raise InvalidInputError("Post does not have a poll")
        if not 0 <= option_index < len(poll.options):
            raise InvalidInputError("Invalid poll option")

        await self._posts.insert_vote(post_id, voter_id, option_index)
        logger.info("User %s voted option %s on post %s", voter_id, option_index, post_id)

        if voter_id == post.user_id:
            return
        voter = await self._users.get_user_by_id(voter_id)
        if voter is None:
            raise NotFoundError("User not found")
        actor = f"@{voter.username}"
        await self._notifications.notify(
            post.user_id,
            f'{actor} voted "{poll.options[option_index]}" in your poll.',
            post_id=post_id,
            mention_prefix=actor,
        )
