"""Domain services."""

from src.domain.services.instructors import InstructorService
from src.domain.services.reviews import ReviewService
from src.domain.services.role_assignments import RoleAssignmentService
from src.domain.services.roles import RoleService

__all__ = [
    "InstructorService",
    "ReviewService",
    "RoleAssignmentService",
    "RoleService",
]
