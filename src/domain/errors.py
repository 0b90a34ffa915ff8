"""Domain error taxonomy.

Every failure the core raises carries a stable ``kind`` plus a human-readable
message. The three families map onto HTTP 400 / 404 / 409 at the API edge;
storage errors are never wrapped and propagate as raised by SQLAlchemy.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for errors raised by domain services."""

    kind = "DomainError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(DomainError):
    """Caller-supplied shape is wrong; never retried."""


class NotFoundError(DomainError):
    """A referenced row does not exist."""


class ConflictError(DomainError):
    """A uniqueness rule would be violated."""


class InvalidRoleError(InvalidRequestError):
    kind = "InvalidRole"


class InvalidSortFieldError(InvalidRequestError):
    kind = "InvalidSortField"


class InvalidFieldError(InvalidRequestError):
    kind = "InvalidField"


class NoFieldsProvidedError(InvalidRequestError):
    kind = "NoFieldsProvided"

    def __init__(self, message: str = "No fields to update provided") -> None:
        super().__init__(message)


class InvalidRateError(InvalidRequestError):
    kind = "InvalidRate"


class InvalidPaginationError(InvalidRequestError):
    kind = "InvalidPagination"


class RoleNotFoundError(NotFoundError):
    kind = "RoleNotFound"


class UserNotFoundError(NotFoundError):
    kind = "UserNotFound"


class AssignmentNotFoundError(NotFoundError):
    kind = "AssignmentNotFound"


class ReviewNotFoundError(NotFoundError):
    kind = "ReviewNotFound"


class InstructorNotFoundError(NotFoundError):
    kind = "InstructorNotFound"


class DuplicateAssignmentError(ConflictError):
    kind = "DuplicateAssignment"


class DuplicateRoleError(ConflictError):
    kind = "DuplicateRole"


class DuplicateInstructorError(ConflictError):
    kind = "DuplicateInstructor"


class ReviewLinkError(DomainError):
    """A stored review resolves to both or neither link row."""

    kind = "ReviewLinkCorrupted"
