from __future__ import annotations

from fastapi import APIRouter, Depends
from src.api.deps import get_current_user, get_instructor_service
from src.api.schemas.common import ApiResponse
from src.api.schemas.instructors import InstructorOut
from src.domain import User
from src.domain.services import InstructorService

router = APIRouter(prefix="/instructors", tags=["Instructors"])


@router.get("/{instructor_id}", response_model=ApiResponse[InstructorOut])
async def get_instructor(
    instructor_id: str,
    service: InstructorService = Depends(get_instructor_service),
    user: User = Depends(get_current_user),
) -> ApiResponse[InstructorOut]:
    """Return an instructor's public profile and counters."""
    record = await service.get(instructor_id)
    return ApiResponse[InstructorOut](
        message="Instructor retrieved successfully",
        data=InstructorOut.model_validate(record),
    )
