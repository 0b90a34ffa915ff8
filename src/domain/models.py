from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import ClassVar

from src.core.auth import Role


class AssignmentStatus(str, enum.Enum):
    """Status of a role assignment. Every transition is an explicit write."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class VerificationStatus(str, enum.Enum):
    VERIFIED = "verified"
    PENDING = "pending"
    REJECTED = "rejected"


class ReviewDiscriminant(str, enum.Enum):
    INSTRUCTOR = "instructor"
    COURSE = "course"


@dataclass(slots=True)
class User:
    """Represents an authenticated actor within the system."""

    user_id: str
    email: str = ""
    roles: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN.value in self.roles


@dataclass(slots=True)
class RoleRecord:
    id: str
    name: Role
    description: str | None = None


@dataclass(slots=True)
class RoleAssignmentRecord:
    """A role assignment joined with its role name."""

    id: str
    user_id: str
    role_id: str
    role_name: Role
    assigned_at: datetime
    status: AssignmentStatus
    expires_at: datetime | None = None
    user_email: str | None = None
    user_first_name: str | None = None
    user_last_name: str | None = None


@dataclass(slots=True)
class InstructorRecord:
    id: str
    first_name: str
    last_name: str
    total_students: int
    total_courses: int
    total_reviews: int
    average_rating: float
    verification_status: VerificationStatus
    verified_at: datetime | None = None


# A review targets exactly one of these. There is no "both" or "neither".


@dataclass(frozen=True, slots=True)
class InstructorTarget:
    instructor_id: str

    discriminant: ClassVar[ReviewDiscriminant] = ReviewDiscriminant.INSTRUCTOR

    @property
    def reviewed_id(self) -> str:
        return self.instructor_id


@dataclass(frozen=True, slots=True)
class CourseTarget:
    course_id: str

    discriminant: ClassVar[ReviewDiscriminant] = ReviewDiscriminant.COURSE

    @property
    def reviewed_id(self) -> str:
        return self.course_id


ReviewTarget = InstructorTarget | CourseTarget


def review_target(discriminant: ReviewDiscriminant | str, reviewed_id: str) -> ReviewTarget:
    """Build the target variant named by ``discriminant``."""
    if ReviewDiscriminant(discriminant) is ReviewDiscriminant.INSTRUCTOR:
        return InstructorTarget(instructor_id=reviewed_id)
    return CourseTarget(course_id=reviewed_id)


@dataclass(slots=True)
class ReviewRecord:
    id: str
    reviewer_id: str
    target: ReviewTarget
    rate: int
    recommended: bool
    created_at: datetime
    updated_at: datetime
    comments: str | None = None

    @property
    def discriminant(self) -> ReviewDiscriminant:
        return self.target.discriminant

    @property
    def reviewed_id(self) -> str:
        return self.target.reviewed_id
