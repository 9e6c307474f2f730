# src/splajompy_api/models/report.py
"""Moderation reports filed against posts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from splajompy_api.db.session import Base
from splajompy_api.db.time import utcnow


class PostReport(Base):
    """``reporter_id`` flagged ``post_id``; one row per reporter and post."""

    __tablename__ = "post_reports"

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.post_id", ondelete="CASCADE"),
        primary_key=True,
    )
    reporter_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
