"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from splajompy_api.db.time import as_utc

from .common import Facet
from .user import PublicUser


class CommentCreate(BaseModel):
    """Schema for adding a comment to a post."""

    text: str = Field(..., min_length=1, max_length=2500)


class CommentOut(BaseModel):
    """Stored comment."""

    comment_id: int
    post_id: int
    user_id: int
    text: str
    facets: list[Facet] = Field(default_factory=list)
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    model_config = ConfigDict(from_attributes=True)


class DetailedComment(CommentOut):
    """Comment with author profile and the viewer's like state."""

    user: PublicUser
    is_liked: bool = False
