from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from src.domain.models import ReviewDiscriminant


class ReviewOut(BaseModel):
    """Review as seen by clients; ``discriminant`` is derived from the stored link."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    reviewer_id: str
    reviewed_id: str
    discriminant: ReviewDiscriminant
    rate: int
    recommended: bool
    comments: str | None = None
    created_at: datetime
    updated_at: datetime


class ReviewCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    reviewed_id: str = Field(..., min_length=1, max_length=36)
    discriminant: ReviewDiscriminant
    rate: int = Field(..., ge=1, le=5)
    recommended: bool
    comments: str | None = Field(None, max_length=2000)


class ReviewUpdate(BaseModel):
    """Partial update. The reviewed entity is fixed at creation and cannot be sent here."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    rate: int | None = Field(None, ge=1, le=5)
    recommended: bool | None = None
    comments: str | None = Field(None, max_length=2000)
