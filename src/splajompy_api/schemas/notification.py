"""Notification-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from splajompy_api.db.time import as_utc

from .common import Facet


class NotificationOut(BaseModel):
    """Notification delivered to the authenticated user."""

    notification_id: int
    user_id: int
    post_id: int | None = None
    comment_id: int | None = None
    message: str
    facets: list[Facet] = Field(default_factory=list)
    viewed: bool
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    model_config = ConfigDict(from_attributes=True)
