"""Reviews written by a user about an instructor or a course."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Query, status
from src.api.deps import (
    ensure_self_or_admin,
    get_current_user,
    get_page_request,
    get_review_service,
)
from src.api.schemas.common import ApiResponse, PaginatedEnvelope
from src.api.schemas.reviews import ReviewCreate, ReviewOut, ReviewUpdate
from src.domain import User
from src.domain.filters import ReviewFilters
from src.domain.models import ReviewRecord, review_target
from src.domain.pagination import PageRequest
from src.domain.services import ReviewService

router = APIRouter(tags=["Reviews"])
logger = structlog.get_logger()


@router.get(
    "/users/{reviewer_id}/reviews",
    response_model=PaginatedEnvelope[ReviewOut],
    response_model_exclude_none=True,
)
async def list_reviews(
    reviewer_id: str,
    request: PageRequest = Depends(get_page_request),
    show_instructors: bool | None = Query(None),
    show_courses: bool | None = Query(None),
    reviewed_id: str | None = Query(None, min_length=1, max_length=36),
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
) -> PaginatedEnvelope[ReviewOut]:
    """List a reviewer's reviews, optionally narrowed to one category or one reviewed entity."""
    ensure_self_or_admin(user, reviewer_id)
    filters = ReviewFilters(
        show_instructors=show_instructors,
        show_courses=show_courses,
        reviewed_id=reviewed_id,
    )
    page = await service.list(reviewer_id, request, filters)
    return PaginatedEnvelope[ReviewOut].model_validate(page, from_attributes=True)


@router.post(
    "/users/{reviewer_id}/reviews",
    response_model=ApiResponse[ReviewOut],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    reviewer_id: str,
    payload: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
) -> ApiResponse[ReviewOut]:
    ensure_self_or_admin(user, reviewer_id)
    record = await service.create(
        reviewer_id,
        review_target(payload.discriminant, payload.reviewed_id),
        rate=payload.rate,
        recommended=payload.recommended,
        comments=payload.comments,
    )
    return _envelope(record, "Review created successfully")


@router.get(
    "/reviews/{review_id}",
    response_model=ApiResponse[ReviewOut],
    response_model_exclude_none=True,
)
async def get_review(
    review_id: str,
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
) -> ApiResponse[ReviewOut]:
    record = await service.get(review_id)
    ensure_self_or_admin(user, record.reviewer_id)
    return _envelope(record, "Review retrieved successfully")


@router.patch(
    "/reviews/{review_id}",
    response_model=ApiResponse[ReviewOut],
    response_model_exclude_none=True,
)
async def update_review(
    review_id: str,
    payload: ReviewUpdate,
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
) -> ApiResponse[ReviewOut]:
    existing = await service.get(review_id)
    ensure_self_or_admin(user, existing.reviewer_id)
    record = await service.update(review_id, payload.model_dump(exclude_unset=True))
    return _envelope(record, "Review updated successfully")


@router.delete("/reviews/{review_id}", response_model=ApiResponse[str])
async def delete_review(
    review_id: str,
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
) -> ApiResponse[str]:
    existing = await service.get(review_id)
    ensure_self_or_admin(user, existing.reviewer_id)
    await service.delete(review_id)
    logger.info("review_removed", review_id=review_id, removed_by=user.user_id)
    return ApiResponse[str](message="Review deleted successfully", data=review_id)


def _envelope(record: ReviewRecord, message: str) -> ApiResponse[ReviewOut]:
    return ApiResponse[ReviewOut](message=message, data=ReviewOut.model_validate(record))
