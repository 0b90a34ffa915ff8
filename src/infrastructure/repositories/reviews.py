"""Review persistence.

A review is one ``reviews`` row plus exactly one row in either
``instructors_reviews`` or ``courses_reviews``. This adapter is the only place
that knows about the two link tables; callers see ``ReviewRecord.target``.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.errors import ReviewLinkError
from src.domain.filters import ReviewFilters
from src.domain.models import (
    CourseTarget,
    InstructorTarget,
    ReviewDiscriminant,
    ReviewRecord,
    ReviewTarget,
)
from src.domain.pagination import PageRequest
from src.infrastructure.db.models import CourseReviewLink, InstructorReviewLink, ReviewModel

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select


class ReviewRepository:
    SORT_COLUMNS = {
        "created_at": ReviewModel.created_at,
        "updated_at": ReviewModel.updated_at,
        "rate": ReviewModel.rate,
    }

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(
        self,
        *,
        reviewer_id: str,
        rate: int,
        recommended: bool,
        comments: str | None,
        created_at: datetime,
    ) -> ReviewModel:
        review = ReviewModel(
            reviewer_id=reviewer_id,
            rate=rate,
            recommended=recommended,
            comments=comments,
            created_at=created_at,
            updated_at=created_at,
        )
        self.session.add(review)
        await self.session.flush()
        return review

    async def add_link(self, review_id: str, target: ReviewTarget) -> None:
        if isinstance(target, InstructorTarget):
            link: InstructorReviewLink | CourseReviewLink = InstructorReviewLink(
                review_id=review_id, instructor_id=target.instructor_id
            )
        else:
            link = CourseReviewLink(review_id=review_id, course_id=target.course_id)
        self.session.add(link)
        await self.session.flush()

    async def get_model(self, review_id: str) -> ReviewModel | None:
        return await self.session.get(ReviewModel, review_id)

    async def get(self, review_id: str) -> ReviewRecord | None:
        stmt = self._joined_select().where(ReviewModel.id == review_id)
        row = (await self.session.execute(stmt)).first()
        return self._to_record(*row) if row else None

    async def apply(self, review: ReviewModel, values: dict[str, Any]) -> None:
        for key, value in values.items():
            setattr(review, key, value)
        await self.session.flush()

    async def delete(self, review: ReviewModel) -> None:
        # Links go first so no orphan survives even where FK cascades are off
        await self.session.execute(
            delete(InstructorReviewLink).where(InstructorReviewLink.review_id == review.id)
        )
        await self.session.execute(
            delete(CourseReviewLink).where(CourseReviewLink.review_id == review.id)
        )
        await self.session.delete(review)
        await self.session.flush()

    async def delete_for_instructor(self, instructor_id: str) -> int:
        """Delete every review linked to ``instructor_id`` together with its link rows."""
        review_ids = list(
            await self.session.scalars(
                select(InstructorReviewLink.review_id).where(
                    InstructorReviewLink.instructor_id == instructor_id
                )
            )
        )
        if not review_ids:
            return 0

        await self.session.execute(
            delete(InstructorReviewLink).where(InstructorReviewLink.review_id.in_(review_ids))
        )
        await self.session.execute(delete(ReviewModel).where(ReviewModel.id.in_(review_ids)))
        await self.session.flush()
        return len(review_ids)

    async def paginate_for_reviewer(
        self,
        reviewer_id: str,
        filters: ReviewFilters,
        request: PageRequest,
        *,
        sort_field: str,
    ) -> tuple[list[ReviewRecord], int]:
        conditions = [ReviewModel.reviewer_id == reviewer_id, *self._conditions(filters)]
        column = self.SORT_COLUMNS[sort_field]

        stmt = (
            self._joined_select()
            .where(*conditions)
            .order_by(column.desc() if request.descending else column.asc(), ReviewModel.id)
            .limit(request.size)
            .offset(request.offset)
        )
        rows = (await self.session.execute(stmt)).all()

        count_stmt = (
            select(func.count())
            .select_from(ReviewModel)
            .outerjoin(InstructorReviewLink, InstructorReviewLink.review_id == ReviewModel.id)
            .outerjoin(CourseReviewLink, CourseReviewLink.review_id == ReviewModel.id)
            .where(*conditions)
        )
        total = await self.session.scalar(count_stmt) or 0
        return [self._to_record(*row) for row in rows], total

    @staticmethod
    def _joined_select() -> Select:
        return (
            select(ReviewModel, InstructorReviewLink.instructor_id, CourseReviewLink.course_id)
            .outerjoin(InstructorReviewLink, InstructorReviewLink.review_id == ReviewModel.id)
            .outerjoin(CourseReviewLink, CourseReviewLink.review_id == ReviewModel.id)
        )

    @staticmethod
    def _conditions(filters: ReviewFilters) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        category = filters.category
        if category is ReviewDiscriminant.INSTRUCTOR:
            conditions.append(InstructorReviewLink.instructor_id.is_not(None))
        elif category is ReviewDiscriminant.COURSE:
            conditions.append(CourseReviewLink.course_id.is_not(None))
        if filters.reviewed_id is not None:
            conditions.append(
                or_(
                    InstructorReviewLink.instructor_id == filters.reviewed_id,
                    CourseReviewLink.course_id == filters.reviewed_id,
                )
            )
        return conditions

    @staticmethod
    def _to_record(
        review: ReviewModel, instructor_id: str | None, course_id: str | None
    ) -> ReviewRecord:
        if (instructor_id is None) == (course_id is None):
            raise ReviewLinkError(
                f"Review {review.id} must be linked to exactly one instructor or course"
            )
        target: ReviewTarget = (
            InstructorTarget(instructor_id=instructor_id)
            if instructor_id is not None
            else CourseTarget(course_id=course_id)  # type: ignore[arg-type]
        )
        return ReviewRecord(
            id=review.id,
            reviewer_id=review.reviewer_id,
            target=target,
            rate=review.rate,
            recommended=review.recommended,
            comments=review.comments or None,
            created_at=review.created_at,
            updated_at=review.updated_at or review.created_at,
        )
