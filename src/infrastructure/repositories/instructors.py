from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.filters import InstructorFilters
from src.domain.models import InstructorRecord, VerificationStatus
from src.domain.pagination import PageRequest
from src.infrastructure.db.models import InstructorModel, UserModel

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select


class InstructorRepository:
    SORT_COLUMNS = {
        "average_rating": InstructorModel.average_rating,
        "total_students": InstructorModel.total_students,
        "total_courses": InstructorModel.total_courses,
        "total_reviews": InstructorModel.total_reviews,
        "verification_status": InstructorModel.verification_status,
    }

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def exists(self, instructor_id: str) -> bool:
        stmt = select(InstructorModel.id).where(InstructorModel.id == instructor_id).limit(1)
        return await self.session.scalar(stmt) is not None

    async def get_model(self, instructor_id: str) -> InstructorModel | None:
        return await self.session.get(InstructorModel, instructor_id)

    async def get(self, instructor_id: str) -> InstructorRecord | None:
        stmt = self._joined_select().where(InstructorModel.id == instructor_id)
        row = (await self.session.execute(stmt)).first()
        return self._to_record(*row) if row else None

    async def add(
        self,
        *,
        instructor_id: str,
        verification_status: VerificationStatus,
        verified_at: datetime | None,
    ) -> InstructorModel:
        instructor = InstructorModel(
            id=instructor_id,
            total_students=0,
            total_courses=0,
            total_reviews=0,
            average_rating=0,
            verification_status=verification_status,
            verified_at=verified_at,
        )
        self.session.add(instructor)
        await self.session.flush()
        return instructor

    async def apply(self, instructor: InstructorModel, values: dict[str, Any]) -> None:
        for key, value in values.items():
            setattr(instructor, key, value)
        await self.session.flush()

    async def delete(self, instructor: InstructorModel) -> None:
        await self.session.delete(instructor)
        await self.session.flush()

    async def paginate(
        self,
        filters: InstructorFilters,
        request: PageRequest,
        *,
        sort_field: str,
    ) -> tuple[list[InstructorRecord], int]:
        conditions = self._conditions(filters)
        column = self.SORT_COLUMNS[sort_field]

        stmt = (
            self._joined_select()
            .where(*conditions)
            .order_by(column.desc() if request.descending else column.asc(), InstructorModel.id)
            .limit(request.size)
            .offset(request.offset)
        )
        rows = (await self.session.execute(stmt)).all()

        count_stmt = (
            select(func.count())
            .select_from(InstructorModel)
            .join(UserModel, InstructorModel.id == UserModel.id)
            .where(*conditions)
        )
        total = await self.session.scalar(count_stmt) or 0
        return [self._to_record(*row) for row in rows], total

    @staticmethod
    def _joined_select() -> Select:
        return select(InstructorModel, UserModel.first_name, UserModel.last_name).join(
            UserModel, InstructorModel.id == UserModel.id
        )

    @staticmethod
    def _conditions(filters: InstructorFilters) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if filters.verification_status is not None:
            conditions.append(InstructorModel.verification_status == filters.verification_status)
        if filters.min_total_reviews is not None:
            conditions.append(InstructorModel.total_reviews >= filters.min_total_reviews)
        if filters.min_total_students is not None:
            conditions.append(InstructorModel.total_students >= filters.min_total_students)
        if filters.min_total_courses is not None:
            conditions.append(InstructorModel.total_courses >= filters.min_total_courses)
        if filters.min_average_rating is not None:
            conditions.append(InstructorModel.average_rating >= filters.min_average_rating)
        return conditions

    @staticmethod
    def _to_record(instructor: InstructorModel, first_name: str, last_name: str) -> InstructorRecord:
        return InstructorRecord(
            id=instructor.id,
            first_name=first_name,
            last_name=last_name,
            total_students=instructor.total_students,
            total_courses=instructor.total_courses,
            total_reviews=instructor.total_reviews,
            average_rating=float(instructor.average_rating),
            verification_status=instructor.verification_status,
            verified_at=instructor.verified_at,
        )
