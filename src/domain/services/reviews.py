"""Reviews of instructors and courses.

A review is only ever observable together with its single link row: creation
writes the review and its link inside one unit of work, and deletion removes
both in one unit of work. The target chosen at creation cannot be changed.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import structlog
from src.domain.errors import (
    InstructorNotFoundError,
    InvalidFieldError,
    InvalidRateError,
    ReviewNotFoundError,
    UserNotFoundError,
)
from src.domain.filters import ReviewFilters
from src.domain.models import InstructorTarget, ReviewRecord, ReviewTarget
from src.domain.pagination import PageRequest, PaginatedResponse
from src.domain.services.updates import validate_partial
from src.infrastructure.repositories.unit_of_work import UnitOfWork

logger = structlog.get_logger()

MIN_RATE = 1
MAX_RATE = 5

REVIEW_SORT_FIELDS = frozenset({"created_at", "updated_at", "rate"})
DEFAULT_REVIEW_SORT = "created_at"

UPDATABLE_FIELDS = frozenset({"rate", "recommended", "comments"})


def check_rate(rate: Any) -> int:
    # bool is an int subclass but never a valid rate
    if isinstance(rate, bool) or not isinstance(rate, int) or not MIN_RATE <= rate <= MAX_RATE:
        raise InvalidRateError(f"Rate must be an integer between {MIN_RATE} and {MAX_RATE}")
    return rate


class ReviewService:
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def create(
        self,
        reviewer_id: str,
        target: ReviewTarget,
        *,
        rate: int,
        recommended: bool,
        comments: str | None = None,
    ) -> ReviewRecord:
        """Write the review and its link row as one transaction."""
        check_rate(rate)

        async with self.uow:
            if not await self.uow.users.exists(reviewer_id):
                raise UserNotFoundError(f"User with id {reviewer_id} not found")

            if isinstance(target, InstructorTarget) and not await self.uow.instructors.exists(
                target.instructor_id
            ):
                raise InstructorNotFoundError(
                    f"Instructor with id {target.instructor_id} not found"
                )

            review = await self.uow.reviews.add(
                reviewer_id=reviewer_id,
                rate=rate,
                recommended=recommended,
                comments=comments or None,
                created_at=datetime.now(UTC),
            )
            await self.uow.reviews.add_link(review.id, target)
            record = await self._require(review.id)

        await logger.ainfo(
            "review_created",
            review_id=record.id,
            reviewer_id=reviewer_id,
            discriminant=record.discriminant.value,
            reviewed_id=record.reviewed_id,
        )
        return record

    async def get(self, review_id: str) -> ReviewRecord:
        async with self.uow:
            return await self._require(review_id)

    async def update(self, review_id: str, partial: Mapping[str, Any]) -> ReviewRecord:
        values = self._coerce(partial)

        async with self.uow:
            review = await self.uow.reviews.get_model(review_id)
            if review is None:
                raise ReviewNotFoundError(f"Review with id {review_id} not found")
            await self.uow.reviews.apply(review, {**values, "updated_at": datetime.now(UTC)})
            record = await self._require(review_id)

        await logger.ainfo("review_updated", review_id=review_id, updated_fields=sorted(values))
        return record

    async def delete(self, review_id: str) -> None:
        async with self.uow:
            review = await self.uow.reviews.get_model(review_id)
            if review is None:
                raise ReviewNotFoundError(f"Review with id {review_id} not found")
            await self.uow.reviews.delete(review)

        await logger.ainfo("review_deleted", review_id=review_id)

    async def list(
        self,
        reviewer_id: str,
        request: PageRequest,
        filters: ReviewFilters | None = None,
    ) -> PaginatedResponse[ReviewRecord]:
        sort_field = request.resolve_sort(REVIEW_SORT_FIELDS, DEFAULT_REVIEW_SORT)

        async with self.uow:
            records, total = await self.uow.reviews.paginate_for_reviewer(
                reviewer_id, filters or ReviewFilters(), request, sort_field=sort_field
            )

        return PaginatedResponse.build(
            records,
            request=request,
            total=total,
            message="Reviews retrieved successfully",
        )

    async def _require(self, review_id: str) -> ReviewRecord:
        record = await self.uow.reviews.get(review_id)
        if record is None:
            raise ReviewNotFoundError(f"Review with id {review_id} not found")
        return record

    @staticmethod
    def _coerce(partial: Mapping[str, Any]) -> dict[str, Any]:
        values = validate_partial(partial, UPDATABLE_FIELDS)

        if "rate" in values:
            check_rate(values["rate"])
        if "recommended" in values and not isinstance(values["recommended"], bool):
            raise InvalidFieldError("recommended must be a boolean")
        if "comments" in values:
            comments = values["comments"]
            if comments is not None and not isinstance(comments, str):
                raise InvalidFieldError("comments must be a string")
            values["comments"] = comments or None

        return values
