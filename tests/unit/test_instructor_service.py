from __future__ import annotations

from datetime import UTC, datetime

import pytest
from src.domain.errors import (
    DuplicateInstructorError,
    InstructorNotFoundError,
    InvalidFieldError,
    InvalidSortFieldError,
    NoFieldsProvidedError,
    UserNotFoundError,
)
from src.domain.filters import InstructorFilters
from src.domain.models import VerificationStatus
from src.domain.pagination import PageRequest
from src.domain.services import InstructorService
from src.infrastructure.repositories import UnitOfWork

from tests.utils import INSTRUCTOR_ID, MISSING_ID, PENDING_INSTRUCTOR_ID, STUDENT_ID

pytestmark = pytest.mark.asyncio


@pytest.fixture()
def service(uow: UnitOfWork) -> InstructorService:
    return InstructorService(uow)


async def test_get_returns_profile_with_names(service: InstructorService) -> None:
    record = await service.get(INSTRUCTOR_ID)

    assert record.first_name == "Ines"
    assert record.last_name == "Instructor"
    assert record.total_students == 120
    assert record.average_rating == pytest.approx(4.5)
    assert record.verification_status is VerificationStatus.VERIFIED


async def test_get_missing_instructor(service: InstructorService) -> None:
    with pytest.raises(InstructorNotFoundError):
        await service.get(STUDENT_ID)


async def test_list_defaults_to_highest_rating_first(service: InstructorService) -> None:
    page = await service.list(PageRequest())

    assert [record.id for record in page.data] == [INSTRUCTOR_ID, PENDING_INSTRUCTOR_ID]


async def test_list_applies_filters(service: InstructorService) -> None:
    pending = await service.list(
        PageRequest(), InstructorFilters(verification_status=VerificationStatus.PENDING)
    )
    popular = await service.list(PageRequest(), InstructorFilters(min_total_students=100))
    rated = await service.list(PageRequest(), InstructorFilters(min_average_rating=4.8))

    assert [record.id for record in pending.data] == [PENDING_INSTRUCTOR_ID]
    assert [record.id for record in popular.data] == [INSTRUCTOR_ID]
    assert rated.pagination.total == 0
    assert rated.pagination.total_pages == 0


async def test_list_rejects_unknown_sort_field(service: InstructorService) -> None:
    with pytest.raises(InvalidSortFieldError):
        await service.list(PageRequest(sort="first_name"))


async def test_create_defaults_to_pending(service: InstructorService) -> None:
    record = await service.create(STUDENT_ID)

    assert record.id == STUDENT_ID
    assert record.verification_status is VerificationStatus.PENDING
    assert record.total_reviews == 0


async def test_create_rejects_duplicates_and_unknown_users(service: InstructorService) -> None:
    with pytest.raises(DuplicateInstructorError):
        await service.create(INSTRUCTOR_ID)
    with pytest.raises(UserNotFoundError):
        await service.create(MISSING_ID)


async def test_update_verification(service: InstructorService) -> None:
    verified_at = datetime(2026, 1, 15, tzinfo=UTC)

    record = await service.update(
        PENDING_INSTRUCTOR_ID,
        {"verificationStatus": "verified", "verified_at": verified_at},
    )

    assert record.verification_status is VerificationStatus.VERIFIED
    assert record.verified_at is not None


async def test_update_validation(service: InstructorService) -> None:
    with pytest.raises(NoFieldsProvidedError):
        await service.update(INSTRUCTOR_ID, {})
    with pytest.raises(InvalidFieldError):
        await service.update(INSTRUCTOR_ID, {"total_reviews": 100})
    with pytest.raises(InvalidFieldError):
        await service.update(INSTRUCTOR_ID, {"verification_status": "approved"})
    with pytest.raises(InstructorNotFoundError):
        await service.update(MISSING_ID, {"verification_status": "rejected"})


async def test_delete(service: InstructorService) -> None:
    await service.delete(PENDING_INSTRUCTOR_ID)

    with pytest.raises(InstructorNotFoundError):
        await service.delete(PENDING_INSTRUCTOR_ID)


async def test_create_maps_primary_key_conflict_to_duplicate(
    service: InstructorService, uow: UnitOfWork, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def not_found(instructor_id: str) -> bool:
        return False

    # A concurrent create commits between the existence check and the insert
    monkeypatch.setattr(uow.instructors, "exists", not_found)

    with pytest.raises(DuplicateInstructorError):
        await service.create(INSTRUCTOR_ID)

    record = await service.get(INSTRUCTOR_ID)
    assert record.total_students == 120
