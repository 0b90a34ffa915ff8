from src.infrastructure.repositories.instructors import InstructorRepository
from src.infrastructure.repositories.reviews import ReviewRepository
from src.infrastructure.repositories.role_assignments import RoleAssignmentRepository
from src.infrastructure.repositories.roles import RoleRepository
from src.infrastructure.repositories.unit_of_work import UnitOfWork
from src.infrastructure.repositories.users import UserRepository

__all__ = [
    "InstructorRepository",
    "ReviewRepository",
    "RoleAssignmentRepository",
    "RoleRepository",
    "UnitOfWork",
    "UserRepository",
]
