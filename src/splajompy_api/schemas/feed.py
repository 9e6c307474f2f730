"""Pagination requests and feed candidates passed between resolver and stores."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .post import RelationshipType


class FeedType(str, Enum):
    """Feed kinds a viewer can request."""

    ALL = "all"
    FOLLOWING = "following"
    MUTUAL = "mutual"
    PROFILE = "profile"


class OffsetPage(BaseModel):
    """Legacy page request: newest post ids first, skipping ``offset`` rows."""

    limit: int = Field(..., ge=1)
    offset: int = Field(0, ge=0)

    model_config = ConfigDict(frozen=True)


class CursorPage(BaseModel):
    """Time-based page request: posts created strictly before ``before``.

    ``before=None`` requests the most recent page.
    """

    limit: int = Field(..., ge=1)
    before: datetime | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_first_page(self) -> bool:
        return self.before is None


Page = OffsetPage | CursorPage


class FeedCandidate(BaseModel):
    """Post id selected for a feed, with mutual-feed display tags."""

    post_id: int
    relationship_type: RelationshipType | None = None
    mutual_usernames: list[str] | None = None

    model_config = ConfigDict(frozen=True)
