# src/splajompy_api/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from splajompy_api.db.time import as_utc

from .common import Facet
from .user import PublicUser

MIN_POLL_OPTIONS = 2
MAX_POLL_OPTIONS = 10


class Poll(BaseModel):
    """Poll stored inside a post's attributes."""

    title: str = Field(..., min_length=1, max_length=300)
    options: list[str] = Field(..., min_length=MIN_POLL_OPTIONS, max_length=MAX_POLL_OPTIONS)

    @field_validator("options")
    @classmethod
    def _reject_blank_options(cls, options: list[str]) -> list[str]:
        cleaned = [option.strip() for option in options]
        if any(not option for option in cleaned):
            raise ValueError("Poll options must not be empty")
        return cleaned


class PollAttachment(BaseModel):
    """Tagged post attribute carrying a poll.

    Stored as ``{"kind": "poll", "poll": {...}}``. New attachment kinds get
    their own model with a distinct ``kind`` literal.
    """

    kind: Literal["poll"] = "poll"
    poll: Poll


PostAttributes = PollAttachment


class PostOut(BaseModel):
    """Stored post as returned by the API."""

    post_id: int
    user_id: int
    text: str
    created_at: datetime
    facets: list[Facet] = Field(default_factory=list)
    attributes: PostAttributes | None = None

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    model_config = ConfigDict(from_attributes=True)

    @property
    def poll(self) -> Poll | None:
        """Return the attached poll, if any."""
        if self.attributes is None:
            return None
        return self.attributes.poll


class ImageOut(BaseModel):
    """Image attached to a post; ``image_blob_url`` is a public URL once enriched."""

    image_id: int
    post_id: int
    height: int
    width: int
    image_blob_url: str
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class RelevantLike(BaseModel):
    """Followed user who liked a post."""

    user_id: int
    username: str


class PollOptionDetail(BaseModel):
    """One poll option with its vote count."""

    title: str
    vote_total: int


class DetailedPoll(BaseModel):
    """Poll tally as seen by one viewer."""

    title: str
    vote_total: int
    current_user_vote: int | None = None
    options: list[PollOptionDetail]


RelationshipType = Literal["friend", "mutual"]


class DetailedPost(BaseModel):
    """Post with all viewer-relative state attached."""

    post: PostOut
    user: PublicUser
    is_liked: bool
    comment_count: int
    images: list[ImageOut] = Field(default_factory=list)
    relevant_likes: list[RelevantLike] = Field(default_factory=list)
    has_other_likes: bool = False
    poll: DetailedPoll | None = None
    is_pinned: bool = False
    relationship_type: RelationshipType | None = None
    mutual_usernames: list[str] | None = None


class ImageData(BaseModel):
    """Pre-uploaded image referenced by storage key."""

    key: str = Field(..., min_length=1, description="Object storage key of the uploaded image")
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    text: str = Field("", description="Post body; length limited by MAX_POST_LENGTH")
    poll: Poll | None = Field(None, description="Optional poll attached to the post")
    images: list[ImageData] = Field(default_factory=list, max_length=10)
