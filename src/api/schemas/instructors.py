from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from src.domain.models import VerificationStatus


class InstructorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    total_students: int
    total_courses: int
    total_reviews: int
    average_rating: float
    verification_status: VerificationStatus
    verified_at: datetime | None = None


class InstructorCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    instructor_id: str = Field(..., min_length=1, max_length=36)
    verification_status: VerificationStatus = VerificationStatus.PENDING
    verified_at: datetime | None = None


class InstructorUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    verification_status: VerificationStatus | None = None
    verified_at: datetime | None = None
