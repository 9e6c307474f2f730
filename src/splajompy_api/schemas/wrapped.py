"""Year-in-review ("wrapped") Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from .post import DetailedPoll, DetailedPost
from .user import PublicUser


class ActivityData(BaseModel):
    """Daily activity (posts, comments and likes) across the year."""

    activity_count_ceiling: int = 0
    counts: dict[str, int] = Field(default_factory=dict, description="ISO date -> actions")
    most_active_day: str | None = None


class SliceData(BaseModel):
    """The user's weighted share of everything posted, commented and liked."""

    percent: float = 0.0
    post_component: float = 0.0
    comment_component: float = 0.0
    like_component: float = 0.0


class ComparativePostStatistics(BaseModel):
    """How the user's posts differ from the average post (user minus average)."""

    post_length_variation: float = 0.0
    image_count_variation: float = 0.0


class FavoriteUser(BaseModel):
    """Someone the user interacted with a lot; ``proportion`` is scaled to 100."""

    user: PublicUser
    proportion: float


class ContentTotals(BaseModel):
    posts: int = 0
    comments: int = 0
    likes: int = 0


class WrappedData(BaseModel):
    """Everything the year-in-review screens display."""

    year: int
    activity_data: ActivityData
    weekly_activity: list[int] = Field(
        ...,
        min_length=7,
        max_length=7,
        description="Sunday-first weekday activity scaled so the busiest day is 100",
    )
    slice_data: SliceData
    comparative_post_statistics: ComparativePostStatistics
    most_liked_post: DetailedPost | None = None
    favorite_users: list[FavoriteUser] = Field(default_factory=list)
    controversial_poll: DetailedPoll | None = None
    total_word_count: int = 0
    generated_utc: datetime
