# src/splajompy_api/models/like.py
"""Like records on posts and comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from splajompy_api.db.session import Base
from splajompy_api.db.time import utcnow


class Like(Base):
    """Presence record: ``user_id`` likes a post, or a comment when ``comment_id`` is set."""

    __tablename__ = "likes"
    __table_args__ = (
        Index("ix_likes_post_id_comment_id", "post_id", "comment_id"),
        Index("ix_likes_user_id", "user_id"),
    )

    like_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.post_id", ondelete="CASCADE"),
        nullable=False,
    )
    comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comments.comment_id", ondelete="CASCADE"),
        nullable=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
