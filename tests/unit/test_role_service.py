from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from src.core.auth import Role
from src.domain.errors import (
    DuplicateRoleError,
    InvalidFieldError,
    InvalidRoleError,
    InvalidSortFieldError,
    NoFieldsProvidedError,
    RoleNotFoundError,
)
from src.domain.pagination import PageRequest
from src.domain.services import RoleAssignmentService, RoleService
from src.infrastructure.db.models import RoleAssignmentModel
from src.infrastructure.repositories import UnitOfWork

from tests.utils import OTHER_STUDENT_ID, STUDENT_ID

pytestmark = pytest.mark.asyncio


@pytest.fixture()
def service(uow: UnitOfWork) -> RoleService:
    return RoleService(uow)


async def test_list_sorted_by_name(service: RoleService) -> None:
    page = await service.list(PageRequest(sort="name", order="asc"))

    assert [record.name for record in page.data] == [Role.ADMIN, Role.INSTRUCTOR, Role.STUDENT]
    assert page.pagination.total == 3


async def test_list_rejects_unknown_sort_field(service: RoleService) -> None:
    with pytest.raises(InvalidSortFieldError):
        await service.list(PageRequest(sort="id_role"))


async def test_get_and_missing_role(service: RoleService) -> None:
    record = await service.get("student")
    assert record.name is Role.STUDENT

    await service.delete(Role.STUDENT)
    with pytest.raises(RoleNotFoundError):
        await service.get(Role.STUDENT)


async def test_create_rejects_duplicate_and_unknown_names(service: RoleService) -> None:
    with pytest.raises(DuplicateRoleError):
        await service.create(Role.ADMIN)
    with pytest.raises(InvalidRoleError):
        await service.create("moderator")


async def test_create_after_delete(service: RoleService) -> None:
    await service.delete(Role.INSTRUCTOR)

    record = await service.create(Role.INSTRUCTOR, "Teaches courses")

    assert record.name is Role.INSTRUCTOR
    assert record.description == "Teaches courses"


async def test_update_description(service: RoleService) -> None:
    record = await service.update(Role.STUDENT, {"description": "Learner"})

    assert record.description == "Learner"


async def test_update_validation(service: RoleService) -> None:
    with pytest.raises(NoFieldsProvidedError):
        await service.update(Role.STUDENT, {})
    with pytest.raises(InvalidFieldError):
        await service.update(Role.STUDENT, {"id": "x"})
    with pytest.raises(DuplicateRoleError):
        await service.update(Role.STUDENT, {"name": "admin"})


async def test_create_maps_unique_name_conflict_to_duplicate(
    service: RoleService, uow: UnitOfWork, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def not_found(name: Role) -> None:
        return None

    # A concurrent create commits between the lookup and the insert
    monkeypatch.setattr(uow.roles, "get_by_name", not_found)

    with pytest.raises(DuplicateRoleError):
        await service.create(Role.ADMIN)


async def test_delete_cascades_to_assignments(
    service: RoleService,
    uow: UnitOfWork,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    assignments = RoleAssignmentService(uow)
    await assignments.assign(STUDENT_ID, Role.STUDENT)
    await assignments.assign(OTHER_STUDENT_ID, Role.STUDENT)
    await assignments.assign(STUDENT_ID, Role.INSTRUCTOR)

    await service.delete(Role.STUDENT)

    async with session_factory() as session:
        remaining = await session.scalar(select(func.count()).select_from(RoleAssignmentModel))
    assert remaining == 1
