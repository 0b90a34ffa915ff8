"""Initial schema for users, roles, assignations, instructors and reviews

Revision ID: 202610010001
Revises:
Create Date: 2026-10-01 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610010001"
down_revision = None
branch_labels = None
depends_on = None

user_role_enum = sa.Enum("admin", "instructor", "student", name="user_role")
role_status_enum = sa.Enum("active", "inactive", "suspended", name="role_status")
verification_status_enum = sa.Enum("verified", "pending", "rejected", name="verification_status")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id_user", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("first_name", sa.String(length=60), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("birth_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "roles",
        sa.Column("id_role", sa.String(length=36), primary_key=True),
        sa.Column("name", user_role_enum, nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.UniqueConstraint("name", name="uq_roles_name"),
    )

    op.create_table(
        "users_roles",
        sa.Column("id_user_role", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id_user", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "role_id",
            sa.String(length=36),
            sa.ForeignKey("roles.id_role", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", role_status_enum, nullable=False, server_default="active"),
        sa.UniqueConstraint("user_id", "role_id", name="users_roles_user_role_idx"),
    )
    op.create_index("ix_users_roles_user_id", "users_roles", ["user_id"])
    op.create_index("ix_users_roles_role_id", "users_roles", ["role_id"])
    op.create_index("users_roles_status_idx", "users_roles", ["status"])

    op.create_table(
        "instructors",
        sa.Column(
            "id_instructor",
            sa.String(length=36),
            sa.ForeignKey("users.id_user", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("total_students", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_courses", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("average_rating", sa.Numeric(3, 2), nullable=False, server_default="0"),
        sa.Column("total_reviews", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "verification_status",
            verification_status_enum,
            nullable=False,
            server_default="pending",
        ),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_instructors_average_rating", "instructors", ["average_rating"])
    op.create_index("ix_instructors_verification_status", "instructors", ["verification_status"])

    op.create_table(
        "reviews",
        sa.Column("id_review", sa.String(length=36), primary_key=True),
        sa.Column(
            "reviewer_id",
            sa.String(length=36),
            sa.ForeignKey("users.id_user", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("rate", sa.SmallInteger(), nullable=False),
        sa.Column("recommended", sa.Boolean(), nullable=False),
        sa.Column("comments", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("rate BETWEEN 1 AND 5", name="ck_reviews_rate_range"),
    )
    op.create_index("ix_reviews_reviewer_id", "reviews", ["reviewer_id"])
    op.create_index("ix_reviews_rate", "reviews", ["rate"])
    op.create_index("ix_reviews_created_at", "reviews", ["created_at"])

    op.create_table(
        "instructors_reviews",
        sa.Column(
            "id_instructor_review",
            sa.String(length=36),
            sa.ForeignKey("reviews.id_review", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "instructor_id",
            sa.String(length=36),
            sa.ForeignKey("instructors.id_instructor", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_instructors_reviews_instructor_id", "instructors_reviews", ["instructor_id"]
    )

    op.create_table(
        "courses_reviews",
        sa.Column(
            "id_course_review",
            sa.String(length=36),
            sa.ForeignKey("reviews.id_review", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("course_id", sa.String(length=36), nullable=False),
    )
    op.create_index("ix_courses_reviews_course_id", "courses_reviews", ["course_id"])


def downgrade() -> None:
    op.drop_index("ix_courses_reviews_course_id", table_name="courses_reviews")
    op.drop_table("courses_reviews")
    op.drop_index("ix_instructors_reviews_instructor_id", table_name="instructors_reviews")
    op.drop_table("instructors_reviews")
    op.drop_index("ix_reviews_created_at", table_name="reviews")
    op.drop_index("ix_reviews_rate", table_name="reviews")
    op.drop_index("ix_reviews_reviewer_id", table_name="reviews")
    op.drop_table("reviews")
    op.drop_index("ix_instructors_verification_status", table_name="instructors")
    op.drop_index("ix_instructors_average_rating", table_name="instructors")
    op.drop_table("instructors")
    op.drop_index("users_roles_status_idx", table_name="users_roles")
    op.drop_index("ix_users_roles_role_id", table_name="users_roles")
    op.drop_index("ix_users_roles_user_id", table_name="users_roles")
    op.drop_table("users_roles")
    op.drop_table("roles")
    op.drop_table("users")

    bind = op.get_bind()
    verification_status_enum.drop(bind, checkfirst=True)
    role_status_enum.drop(bind, checkfirst=True)
    user_role_enum.drop(bind, checkfirst=True)
