"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from splajompy_api.db.time import as_utc


class PublicUser(BaseModel):
    """Public profile fields shown alongside posts and comments."""

    user_id: int
    username: str
    name: str | None = None
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    model_config = ConfigDict(from_attributes=True)


class DetailedUser(PublicUser):
    """Profile page for one user, relative to the viewer."""

    bio: str = ""
    is_following: bool = False
    is_follower: bool = False
    is_blocking: bool = False
    is_muting: bool = False
    is_friend: bool = False


class ConnectionUser(PublicUser):
    """Entry in a followers, following or mutuals listing."""

    followed_at: datetime

    @field_validator("followed_at")
    @classmethod
    def _followed_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class ProfileUpdate(BaseModel):
    """Editable profile fields; omitted fields keep their current value."""

    name: str | None = Field(default=None, max_length=25)
    bio: str | None = Field(default=None, max_length=400)
