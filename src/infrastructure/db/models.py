from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from src.core.auth import Role
from src.domain.models import AssignmentStatus, VerificationStatus

from .base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _enum_values(enum_cls: type) -> list[str]:
    return [member.value for member in enum_cls]


class UserModel(Base):
    """Users are owned by the user CRUD collaborator; this service reads them."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column("id_user", String(36), primary_key=True, default=_uuid)
    email: Mapped[str] = mapped_column(String(254), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(60), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    birth_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email})>"


class RoleModel(Base):
    __tablename__ = "roles"

    id: Mapped[str] = mapped_column("id_role", String(36), primary_key=True, default=_uuid)
    name: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role", values_callable=_enum_values),
        unique=True,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<RoleModel(id={self.id}, name={self.name.value})>"


class RoleAssignmentModel(Base):
    """Membership of one user in one role. At most one row per (user, role)."""

    __tablename__ = "users_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="users_roles_user_role_idx"),
        Index("users_roles_status_idx", "status"),
    )

    id: Mapped[str] = mapped_column("id_user_role", String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id_user", ondelete="CASCADE"), nullable=False, index=True
    )
    role_id: Mapped[str] = mapped_column(
        ForeignKey("roles.id_role", ondelete="CASCADE"), nullable=False, index=True
    )
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[AssignmentStatus] = mapped_column(
        Enum(AssignmentStatus, name="role_status", values_callable=_enum_values),
        default=AssignmentStatus.ACTIVE,
        nullable=False,
    )

    role: Mapped[RoleModel] = relationship()
    user: Mapped[UserModel] = relationship()


class InstructorModel(Base):
    __tablename__ = "instructors"

    id: Mapped[str] = mapped_column(
        "id_instructor",
        ForeignKey("users.id_user", ondelete="CASCADE"),
        primary_key=True,
    )
    total_students: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_courses: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    average_rating: Mapped[float] = mapped_column(
        Numeric(3, 2, asdecimal=False), default=0, nullable=False, index=True
    )
    total_reviews: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    verification_status: Mapped[VerificationStatus] = mapped_column(
        Enum(VerificationStatus, name="verification_status", values_callable=_enum_values),
        default=VerificationStatus.PENDING,
        nullable=False,
        index=True,
    )
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped[UserModel] = relationship()


class ReviewModel(Base):
    """Shared review row. Its target lives in exactly one of the link tables."""

    __tablename__ = "reviews"
    __table_args__ = (CheckConstraint("rate BETWEEN 1 AND 5", name="rate_range"),)

    id: Mapped[str] = mapped_column("id_review", String(36), primary_key=True, default=_uuid)
    reviewer_id: Mapped[str] = mapped_column(
        ForeignKey("users.id_user", ondelete="CASCADE"), nullable=False, index=True
    )
    rate: Mapped[int] = mapped_column(SmallInteger, nullable=False, index=True)
    recommended: Mapped[bool] = mapped_column(Boolean, nullable=False)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class InstructorReviewLink(Base):
    __tablename__ = "instructors_reviews"

    review_id: Mapped[str] = mapped_column(
        "id_instructor_review",
        ForeignKey("reviews.id_review", ondelete="CASCADE"),
        primary_key=True,
    )
    instructor_id: Mapped[str] = mapped_column(
        ForeignKey("instructors.id_instructor", ondelete="CASCADE"), nullable=False, index=True
    )


class CourseReviewLink(Base):
    __tablename__ = "courses_reviews"

    review_id: Mapped[str] = mapped_column(
        "id_course_review",
        ForeignKey("reviews.id_review", ondelete="CASCADE"),
        primary_key=True,
    )
    # Courses belong to another service, so there is no foreign key here
    course_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
