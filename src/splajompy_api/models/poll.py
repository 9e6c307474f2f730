# src/splajompy_api/models/poll.py
"""Models capturing votes on post polls."""

from sqlalchemy import ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from splajompy_api.db.session import Base


class PollVote(Base):
    """Per-user vote on a post's poll.

    The composite primary key allows a single vote per (post, voter); voting
    again overwrites ``option_index``.
    """

    __tablename__ = "poll_votes"
    __table_args__ = (Index("ix_poll_votes_post_id", "post_id"),)

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.post_id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    option_index: Mapped[int] = mapped_column(Integer, nullable=False)
