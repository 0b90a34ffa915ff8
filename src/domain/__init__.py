from src.domain.models import (
    AssignmentStatus,
    CourseTarget,
    InstructorRecord,
    InstructorTarget,
    ReviewDiscriminant,
    ReviewRecord,
    ReviewTarget,
    RoleAssignmentRecord,
    RoleRecord,
    User,
    VerificationStatus,
    review_target,
)

__all__ = [
    "AssignmentStatus",
    "CourseTarget",
    "InstructorRecord",
    "InstructorTarget",
    "ReviewDiscriminant",
    "ReviewRecord",
    "ReviewTarget",
    "RoleAssignmentRecord",
    "RoleRecord",
    "User",
    "VerificationStatus",
    "review_target",
]
