# src/splajompy_api/models/post.py
"""SQLAlchemy models for posts and related attributes."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from splajompy_api.db.session import Base
from splajompy_api.db.time import utcnow


class Post(Base):
    """Primary content entity produced by users.

    Text is immutable after creation; a post is only ever deleted.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_user_id_created_at", "user_id", "created_at"),
        Index("ix_posts_created_at", "created_at"),
    )

    post_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    # List of {"type", "user_id", "index_start", "index_end"} spans (Facet.model_dump()).
    facets: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    # Tagged attachment, e.g. {"kind": "poll", "poll": {...}}; NULL for plain posts.
    attributes: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)


class Image(Base):
    """Image attached to a post; ``image_blob_url`` holds the storage key."""

    __tablename__ = "images"
    __table_args__ = (Index("ix_images_post_id", "post_id"),)

    image_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.post_id", ondelete="CASCADE"),
        nullable=False,
    )
    height: Mapped[int] = mapped_column(Integer, nullable=False)
    width: Mapped[int] = mapped_column(Integer, nullable=False)
    image_blob_url: Mapped[str] = mapped_column(Text, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class PinnedPost(Base):
    """At most one pinned post per user."""

    __tablename__ = "pinned_posts"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.post_id", ondelete="CASCADE"),
        nullable=False,
    )
    pinned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
