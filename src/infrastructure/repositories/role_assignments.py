from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.filters import RoleAssignmentFilters
from src.domain.models import AssignmentStatus, RoleAssignmentRecord
from src.domain.pagination import PageRequest
from src.infrastructure.db.models import RoleAssignmentModel, RoleModel, UserModel

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select


class RoleAssignmentRepository:
    """Persistence for ``users_roles`` rows, always read back joined with the role."""

    SORT_COLUMNS = {
        "assigned_at": RoleAssignmentModel.assigned_at,
        "expires_at": RoleAssignmentModel.expires_at,
        "status": RoleAssignmentModel.status,
    }

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(
        self,
        *,
        user_id: str,
        role_id: str,
        assigned_at: datetime,
        status: AssignmentStatus = AssignmentStatus.ACTIVE,
    ) -> RoleAssignmentModel:
        assignment = RoleAssignmentModel(
            user_id=user_id,
            role_id=role_id,
            assigned_at=assigned_at,
            expires_at=None,
            status=status,
        )
        self.session.add(assignment)
        await self.session.flush()
        return assignment

    async def find(self, *, user_id: str, role_id: str) -> RoleAssignmentModel | None:
        stmt: Select[tuple[RoleAssignmentModel]] = select(RoleAssignmentModel).where(
            RoleAssignmentModel.user_id == user_id,
            RoleAssignmentModel.role_id == role_id,
        )
        return await self.session.scalar(stmt)

    async def get_model(self, assignment_id: str) -> RoleAssignmentModel | None:
        return await self.session.get(RoleAssignmentModel, assignment_id)

    async def get(self, assignment_id: str) -> RoleAssignmentRecord | None:
        stmt = self._joined_select().where(RoleAssignmentModel.id == assignment_id)
        row = (await self.session.execute(stmt)).first()
        return self._to_record(*row) if row else None

    async def apply(self, assignment: RoleAssignmentModel, values: dict[str, Any]) -> None:
        for key, value in values.items():
            setattr(assignment, key, value)
        await self.session.flush()

    async def delete(self, assignment: RoleAssignmentModel) -> None:
        await self.session.delete(assignment)
        await self.session.flush()

    async def paginate(
        self,
        filters: RoleAssignmentFilters,
        request: PageRequest,
        *,
        sort_field: str,
    ) -> tuple[list[RoleAssignmentRecord], int]:
        conditions = self._conditions(filters)
        column = self.SORT_COLUMNS[sort_field]

        stmt = (
            self._joined_select()
            .where(*conditions)
            .order_by(column.desc() if request.descending else column.asc(), RoleAssignmentModel.id)
            .limit(request.size)
            .offset(request.offset)
        )
        rows = (await self.session.execute(stmt)).all()

        count_stmt = (
            select(func.count())
            .select_from(RoleAssignmentModel)
            .join(RoleModel, RoleAssignmentModel.role_id == RoleModel.id)
            .join(UserModel, RoleAssignmentModel.user_id == UserModel.id)
            .where(*conditions)
        )
        total = await self.session.scalar(count_stmt) or 0
        return [self._to_record(*row) for row in rows], total

    @staticmethod
    def _joined_select() -> Select:
        return (
            select(
                RoleAssignmentModel,
                RoleModel.name,
                UserModel.email,
                UserModel.first_name,
                UserModel.last_name,
            )
            .join(RoleModel, RoleAssignmentModel.role_id == RoleModel.id)
            .join(UserModel, RoleAssignmentModel.user_id == UserModel.id)
        )

    @staticmethod
    def _conditions(filters: RoleAssignmentFilters) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if filters.assigned_from is not None:
            conditions.append(RoleAssignmentModel.assigned_at >= filters.assigned_from)
        if filters.assigned_to is not None:
            conditions.append(RoleAssignmentModel.assigned_at <= filters.assigned_to)
        if filters.expires_from is not None:
            conditions.append(RoleAssignmentModel.expires_at >= filters.expires_from)
        if filters.expires_to is not None:
            conditions.append(RoleAssignmentModel.expires_at <= filters.expires_to)
        if filters.status is not None:
            conditions.append(RoleAssignmentModel.status == filters.status)
        if filters.role is not None:
            conditions.append(RoleModel.name == filters.role)
        return conditions

    @staticmethod
    def _to_record(
        assignment: RoleAssignmentModel,
        role_name: Any,
        email: str | None,
        first_name: str | None,
        last_name: str | None,
    ) -> RoleAssignmentRecord:
        return RoleAssignmentRecord(
            id=assignment.id,
            user_id=assignment.user_id,
            role_id=assignment.role_id,
            role_name=role_name,
            assigned_at=assignment.assigned_at,
            expires_at=assignment.expires_at,
            status=assignment.status,
            user_email=email,
            user_first_name=first_name,
            user_last_name=last_name,
        )
