"""Admin-only management of roles, role assignations and instructors."""

from __future__ import annotations

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, Query, status
from src.api.deps import (
    get_assignment_service,
    get_instructor_service,
    get_page_request,
    get_role_service,
    require_roles,
)
from src.api.schemas.assignments import (
    RoleAssignmentCreate,
    RoleAssignmentOut,
    RoleAssignmentUpdate,
)
from src.api.schemas.common import ApiResponse, PaginatedEnvelope
from src.api.schemas.instructors import InstructorCreate, InstructorOut, InstructorUpdate
from src.api.schemas.roles import RoleCreate, RoleOut, RoleUpdate
from src.core.auth import Role
from src.domain import User
from src.domain.filters import InstructorFilters, RoleAssignmentFilters
from src.domain.models import AssignmentStatus, VerificationStatus
from src.domain.pagination import PageRequest
from src.domain.services import (
    InstructorService,
    RoleAssignmentService,
    RoleService,
)

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = structlog.get_logger()

require_admin = require_roles([Role.ADMIN])


# Roles


@router.get("/roles", response_model=PaginatedEnvelope[RoleOut])
async def list_roles(
    request: PageRequest = Depends(get_page_request),
    service: RoleService = Depends(get_role_service),
    admin: User = Depends(require_admin),
) -> PaginatedEnvelope[RoleOut]:
    page = await service.list(request)
    return PaginatedEnvelope[RoleOut].model_validate(page, from_attributes=True)


@router.get("/roles/{name}", response_model=ApiResponse[RoleOut])
async def get_role(
    name: str,
    service: RoleService = Depends(get_role_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[RoleOut]:
    role = await service.get(name)
    return ApiResponse[RoleOut](
        message="Role retrieved successfully",
        data=RoleOut.model_validate(role),
    )


@router.post("/roles", response_model=ApiResponse[RoleOut], status_code=status.HTTP_201_CREATED)
async def create_role(
    payload: RoleCreate,
    service: RoleService = Depends(get_role_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[RoleOut]:
    role = await service.create(payload.name, payload.description)
    logger.info("admin_role_created", role=role.name.value, admin_user=admin.user_id)
    return ApiResponse[RoleOut](
        message="Role created successfully",
        data=RoleOut.model_validate(role),
    )


@router.put("/roles/{name}", response_model=ApiResponse[RoleOut])
async def update_role(
    name: str,
    payload: RoleUpdate,
    service: RoleService = Depends(get_role_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[RoleOut]:
    role = await service.update(name, payload.model_dump(exclude_unset=True))
    return ApiResponse[RoleOut](
        message="Role updated successfully",
        data=RoleOut.model_validate(role),
    )


@router.delete("/roles/{name}", response_model=ApiResponse[str])
async def delete_role(
    name: str,
    service: RoleService = Depends(get_role_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[str]:
    await service.delete(name)
    logger.info("admin_role_deleted", role=name, admin_user=admin.user_id)
    return ApiResponse[str](message="Role deleted successfully", data=name)


# Role assignations


@router.get("/assignations", response_model=PaginatedEnvelope[RoleAssignmentOut])
async def list_assignations(
    request: PageRequest = Depends(get_page_request),
    assigned_from: datetime | None = Query(None),
    assigned_to: datetime | None = Query(None),
    expires_from: datetime | None = Query(None),
    expires_to: datetime | None = Query(None),
    status_filter: AssignmentStatus | None = Query(None, alias="status"),
    role: Role | None = Query(None),
    service: RoleAssignmentService = Depends(get_assignment_service),
    admin: User = Depends(require_admin),
) -> PaginatedEnvelope[RoleAssignmentOut]:
    """List role assignations with date-range, status and role filters."""
    filters = RoleAssignmentFilters(
        assigned_from=assigned_from,
        assigned_to=assigned_to,
        expires_from=expires_from,
        expires_to=expires_to,
        status=status_filter,
        role=role,
    )
    page = await service.list(request, filters)
    return PaginatedEnvelope[RoleAssignmentOut].model_validate(page, from_attributes=True)


@router.post(
    "/assignations",
    response_model=ApiResponse[str],
    status_code=status.HTTP_201_CREATED,
)
async def assign_role(
    payload: RoleAssignmentCreate,
    service: RoleAssignmentService = Depends(get_assignment_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[str]:
    assignment_id = await service.assign(payload.user_id, payload.role)
    logger.info(
        "admin_role_assigned",
        assignment_id=assignment_id,
        user_id=payload.user_id,
        admin_user=admin.user_id,
    )
    return ApiResponse[str](
        message=f"Role {payload.role} assigned to user {payload.user_id} successfully",
        data=assignment_id,
    )


@router.put(
    "/assignations/user/{user_id}/role/{role}",
    response_model=ApiResponse[RoleAssignmentOut],
)
async def update_assignation_by_user_and_role(
    user_id: str,
    role: str,
    payload: RoleAssignmentUpdate,
    service: RoleAssignmentService = Depends(get_assignment_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[RoleAssignmentOut]:
    record = await service.update_by_user_and_role(
        user_id, role, payload.model_dump(exclude_unset=True)
    )
    return ApiResponse[RoleAssignmentOut](
        message=f"Role {record.role_name.value} of user {user_id} updated successfully",
        data=RoleAssignmentOut.model_validate(record),
    )


@router.put("/assignations/{assignation_id}", response_model=ApiResponse[RoleAssignmentOut])
async def update_assignation(
    assignation_id: str,
    payload: RoleAssignmentUpdate,
    service: RoleAssignmentService = Depends(get_assignment_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[RoleAssignmentOut]:
    record = await service.update_by_id(assignation_id, payload.model_dump(exclude_unset=True))
    return ApiResponse[RoleAssignmentOut](
        message=f"Role assignation {assignation_id} updated successfully",
        data=RoleAssignmentOut.model_validate(record),
    )


@router.delete("/assignations/user/{user_id}/role/{role}", response_model=ApiResponse[str])
async def revoke_role(
    user_id: str,
    role: str,
    service: RoleAssignmentService = Depends(get_assignment_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[str]:
    await service.revoke_by_user_and_role(user_id, role)
    logger.info("admin_role_revoked", user_id=user_id, role=role, admin_user=admin.user_id)
    return ApiResponse[str](
        message=f"Role {role} revoked from user {user_id} successfully",
        data=user_id,
    )


@router.delete("/assignations/{assignation_id}", response_model=ApiResponse[str])
async def revoke_assignation(
    assignation_id: str,
    service: RoleAssignmentService = Depends(get_assignment_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[str]:
    await service.revoke_by_id(assignation_id)
    logger.info(
        "admin_role_revoked",
        assignment_id=assignation_id,
        admin_user=admin.user_id,
    )
    return ApiResponse[str](
        message=f"Role assignation {assignation_id} revoked successfully",
        data=assignation_id,
    )


# Instructors


@router.get("/instructors", response_model=PaginatedEnvelope[InstructorOut])
async def list_instructors(
    request: PageRequest = Depends(get_page_request),
    verification_status: VerificationStatus | None = Query(None),
    min_total_reviews: int | None = Query(None, ge=0),
    min_total_students: int | None = Query(None, ge=0),
    min_total_courses: int | None = Query(None, ge=0),
    min_average_rating: float | None = Query(None, ge=0, le=5),
    service: InstructorService = Depends(get_instructor_service),
    admin: User = Depends(require_admin),
) -> PaginatedEnvelope[InstructorOut]:
    filters = InstructorFilters(
        verification_status=verification_status,
        min_total_reviews=min_total_reviews,
        min_total_students=min_total_students,
        min_total_courses=min_total_courses,
        min_average_rating=min_average_rating,
    )
    page = await service.list(request, filters)
    return PaginatedEnvelope[InstructorOut].model_validate(page, from_attributes=True)


@router.post(
    "/instructors",
    response_model=ApiResponse[InstructorOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_instructor(
    payload: InstructorCreate,
    service: InstructorService = Depends(get_instructor_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[InstructorOut]:
    record = await service.create(
        payload.instructor_id,
        verification_status=payload.verification_status,
        verified_at=payload.verified_at,
    )
    return ApiResponse[InstructorOut](
        message="Instructor created successfully",
        data=InstructorOut.model_validate(record),
    )


@router.put("/instructors/{instructor_id}", response_model=ApiResponse[InstructorOut])
async def update_instructor(
    instructor_id: str,
    payload: InstructorUpdate,
    service: InstructorService = Depends(get_instructor_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[InstructorOut]:
    record = await service.update(instructor_id, payload.model_dump(exclude_unset=True))
    return ApiResponse[InstructorOut](
        message="Instructor updated successfully",
        data=InstructorOut.model_validate(record),
    )


@router.delete("/instructors/{instructor_id}", response_model=ApiResponse[str])
async def delete_instructor(
    instructor_id: str,
    service: InstructorService = Depends(get_instructor_service),
    admin: User = Depends(require_admin),
) -> ApiResponse[str]:
    await service.delete(instructor_id)
    logger.info("admin_instructor_deleted", instructor_id=instructor_id, admin_user=admin.user_id)
    return ApiResponse[str](message="Instructor deleted successfully", data=instructor_id)
