from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError
from src.core.auth import Role
from src.domain.errors import DuplicateRoleError, RoleNotFoundError
from src.domain.models import RoleRecord
from src.domain.pagination import PageRequest, PaginatedResponse
from src.domain.services.updates import parse_role, validate_partial
from src.infrastructure.db.models import RoleModel
from src.infrastructure.repositories.unit_of_work import UnitOfWork

logger = structlog.get_logger()

ROLE_SORT_FIELDS = frozenset({"name", "description"})
DEFAULT_ROLE_SORT = "name"

UPDATABLE_FIELDS = frozenset({"name", "description"})


class RoleService:
    """CRUD over the role reference table; names come from the closed enum."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def list(self, request: PageRequest) -> PaginatedResponse[RoleRecord]:
        sort_field = request.resolve_sort(ROLE_SORT_FIELDS, DEFAULT_ROLE_SORT)

        async with self.uow:
            records, total = await self.uow.roles.paginate(request, sort_field=sort_field)

        return PaginatedResponse.build(
            records,
            request=request,
            total=total,
            message="Roles retrieved successfully",
        )

    async def get(self, name: Role | str) -> RoleRecord:
        role_name = parse_role(name)
        async with self.uow:
            role = await self._require(role_name)
            return self.uow.roles.to_record(role)

    async def create(self, name: Role | str, description: str | None = None) -> RoleRecord:
        role_name = parse_role(name)

        async with self.uow:
            if await self.uow.roles.get_by_name(role_name) is not None:
                raise DuplicateRoleError(f"Role with name {role_name.value} already exists")
            try:
                role = await self.uow.roles.add(role_name, description)
            except IntegrityError as exc:
                raise DuplicateRoleError(
                    f"Role with name {role_name.value} already exists"
                ) from exc
            record = self.uow.roles.to_record(role)

        logger.info("role_created", role=role_name.value)
        return record

    async def update(self, name: Role | str, partial: Mapping[str, Any]) -> RoleRecord:
        values = validate_partial(partial, UPDATABLE_FIELDS)
        if "name" in values:
            values["name"] = parse_role(values["name"])
        role_name = parse_role(name)

        async with self.uow:
            role = await self._require(role_name)
            new_name = values.get("name")
            if new_name is not None and new_name is not role.name:
                if await self.uow.roles.get_by_name(new_name) is not None:
                    raise DuplicateRoleError(f"Role with name {new_name.value} already exists")
            await self.uow.roles.apply(role, values)
            record = self.uow.roles.to_record(role)

        logger.info("role_updated", role=role_name.value, updated_fields=sorted(values))
        return record

    async def delete(self, name: Role | str) -> None:
        role_name = parse_role(name)
        async with self.uow:
            role = await self._require(role_name)
            await self.uow.roles.delete(role)

        logger.info("role_deleted", role=role_name.value)

    async def _require(self, role_name: Role) -> RoleModel:
        role = await self.uow.roles.get_by_name(role_name)
        if role is None:
            raise RoleNotFoundError(f"Role with name {role_name.value} not found")
        return role
