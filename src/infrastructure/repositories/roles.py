from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import Role
from src.domain.models import RoleRecord
from src.domain.pagination import PageRequest
from src.infrastructure.db.models import RoleModel

if TYPE_CHECKING:
    from sqlalchemy import Select


class RoleRepository:
    SORT_COLUMNS = {
        "name": RoleModel.name,
        "description": RoleModel.description,
    }

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_name(self, name: Role) -> RoleModel | None:
        stmt: Select[tuple[RoleModel]] = select(RoleModel).where(RoleModel.name == name)
        return await self.session.scalar(stmt)

    async def paginate(
        self, request: PageRequest, *, sort_field: str
    ) -> tuple[list[RoleRecord], int]:
        column = self.SORT_COLUMNS[sort_field]
        stmt: Select[tuple[RoleModel]] = (
            select(RoleModel)
            .order_by(column.desc() if request.descending else column.asc(), RoleModel.id)
            .limit(request.size)
            .offset(request.offset)
        )
        roles = (await self.session.execute(stmt)).scalars().all()
        total = await self.session.scalar(select(func.count()).select_from(RoleModel)) or 0
        return [self.to_record(role) for role in roles], total

    async def add(self, name: Role, description: str | None) -> RoleModel:
        role = RoleModel(name=name, description=description)
        self.session.add(role)
        await self.session.flush()
        return role

    async def apply(self, role: RoleModel, values: dict[str, Any]) -> None:
        for key, value in values.items():
            setattr(role, key, value)
        await self.session.flush()

    async def delete(self, role: RoleModel) -> None:
        await self.session.delete(role)
        await self.session.flush()

    @staticmethod
    def to_record(role: RoleModel) -> RoleRecord:
        return RoleRecord(id=role.id, name=role.name, description=role.description)
