"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class Facet(BaseModel):
    """Span of post, comment or notification text linked to a user."""

    type: str = Field("mention", description="Facet kind; only mentions exist today")
    user_id: int
    index_start: int = Field(..., ge=0, description="Inclusive start offset in the text")
    index_end: int = Field(..., ge=0, description="Exclusive end offset in the text")


class CountResponse(BaseModel):
    """Single integer count."""

    count: int
