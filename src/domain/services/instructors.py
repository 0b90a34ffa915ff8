from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError
from src.domain.errors import (
    DuplicateInstructorError,
    InstructorNotFoundError,
    InvalidFieldError,
    UserNotFoundError,
)
from src.domain.filters import InstructorFilters
from src.domain.models import InstructorRecord, VerificationStatus
from src.domain.pagination import PageRequest, PaginatedResponse
from src.domain.services.updates import validate_partial
from src.infrastructure.repositories.unit_of_work import UnitOfWork

logger = structlog.get_logger()

INSTRUCTOR_SORT_FIELDS = frozenset(
    {"average_rating", "total_students", "total_courses", "total_reviews", "verification_status"}
)
DEFAULT_INSTRUCTOR_SORT = "average_rating"

UPDATABLE_FIELDS = frozenset({"verification_status", "verified_at"})
FIELD_ALIASES = {"verificationStatus": "verification_status", "verifiedAt": "verified_at"}


def parse_verification_status(value: VerificationStatus | str) -> VerificationStatus:
    try:
        return VerificationStatus(value)
    except ValueError as exc:
        raise InvalidFieldError(f"Invalid verification status: {value}") from exc


class InstructorService:
    """Instructor verification records layered onto existing users."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def list(
        self,
        request: PageRequest,
        filters: InstructorFilters | None = None,
    ) -> PaginatedResponse[InstructorRecord]:
        sort_field = request.resolve_sort(INSTRUCTOR_SORT_FIELDS, DEFAULT_INSTRUCTOR_SORT)

        async with self.uow:
            records, total = await self.uow.instructors.paginate(
                filters or InstructorFilters(), request, sort_field=sort_field
            )

        return PaginatedResponse.build(
            records,
            request=request,
            total=total,
            message="Instructors retrieved successfully",
        )

    async def get(self, instructor_id: str) -> InstructorRecord:
        async with self.uow:
            return await self._require(instructor_id)

    async def create(
        self,
        instructor_id: str,
        *,
        verification_status: VerificationStatus | str = VerificationStatus.PENDING,
        verified_at: datetime | None = None,
    ) -> InstructorRecord:
        status = parse_verification_status(verification_status)

        async with self.uow:
            if not await self.uow.users.exists(instructor_id):
                raise UserNotFoundError(f"User with id {instructor_id} not found")
            if await self.uow.instructors.exists(instructor_id):
                raise DuplicateInstructorError(f"Instructor with id {instructor_id} already exists")

            try:
                await self.uow.instructors.add(
                    instructor_id=instructor_id,
                    verification_status=status,
                    verified_at=verified_at,
                )
            except IntegrityError as exc:
                raise DuplicateInstructorError(
                    f"Instructor with id {instructor_id} already exists"
                ) from exc
            record = await self._require(instructor_id)

        logger.info("instructor_created", instructor_id=instructor_id, status=status.value)
        return record

    async def update(self, instructor_id: str, partial: Mapping[str, Any]) -> InstructorRecord:
        values = validate_partial(partial, UPDATABLE_FIELDS, aliases=FIELD_ALIASES)
        if "verification_status" in values:
            values["verification_status"] = parse_verification_status(
                values["verification_status"]
            )

        async with self.uow:
            instructor = await self.uow.instructors.get_model(instructor_id)
            if instructor is None:
                raise InstructorNotFoundError(f"Instructor with id {instructor_id} not found")
            await self.uow.instructors.apply(instructor, values)
            record = await self._require(instructor_id)

        logger.info(
            "instructor_updated",
            instructor_id=instructor_id,
            updated_fields=sorted(values),
        )
        return record

    async def delete(self, instructor_id: str) -> None:
        async with self.uow:
            instructor = await self.uow.instructors.get_model(instructor_id)
            if instructor is None:
                raise InstructorNotFoundError(f"Instructor with id {instructor_id} not found")
            # Reviews would otherwise outlive their cascaded link rows
            removed_reviews = await self.uow.reviews.delete_for_instructor(instructor_id)
            await self.uow.instructors.delete(instructor)

        logger.info(
            "instructor_deleted",
            instructor_id=instructor_id,
            removed_reviews=removed_reviews,
        )

    async def _require(self, instructor_id: str) -> InstructorRecord:
        record = await self.uow.instructors.get(instructor_id)
        if record is None:
            raise InstructorNotFoundError(f"Instructor with id {instructor_id} not found")
        return record
