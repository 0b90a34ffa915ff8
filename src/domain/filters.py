"""Value objects narrowing list queries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from src.core.auth import Role
from src.domain.errors import InvalidFieldError
from src.domain.models import AssignmentStatus, ReviewDiscriminant, VerificationStatus


def _check_range(name: str, start: datetime | None, end: datetime | None) -> None:
    if start is not None and end is not None and start > end:
        raise InvalidFieldError(f"{name} start must be before {name} end")


@dataclass(frozen=True, slots=True)
class RoleAssignmentFilters:
    assigned_from: datetime | None = None
    assigned_to: datetime | None = None
    expires_from: datetime | None = None
    expires_to: datetime | None = None
    status: AssignmentStatus | None = None
    role: Role | None = None

    def __post_init__(self) -> None:
        _check_range("assignment date", self.assigned_from, self.assigned_to)
        _check_range("expiration date", self.expires_from, self.expires_to)


@dataclass(frozen=True, slots=True)
class ReviewFilters:
    show_instructors: bool | None = None
    show_courses: bool | None = None
    reviewed_id: str | None = None

    @property
    def category(self) -> ReviewDiscriminant | None:
        """Single category to restrict to, or None when both categories apply."""
        if self.show_instructors and not self.show_courses:
            return ReviewDiscriminant.INSTRUCTOR
        if self.show_courses and not self.show_instructors:
            return ReviewDiscriminant.COURSE
        return None


@dataclass(frozen=True, slots=True)
class InstructorFilters:
    """Exact verification status plus lower bounds on the counters."""

    verification_status: VerificationStatus | None = None
    min_total_reviews: int | None = None
    min_total_students: int | None = None
    min_total_courses: int | None = None
    min_average_rating: float | None = None
