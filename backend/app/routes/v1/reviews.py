# backend/app/routes/v1/reviews.py
"""
Reviews routes - API v1

Versioned review endpoints under /api/v1/reviews.
All business logic delegated to ReviewService.

Endpoints:
    POST /                           → Submit a review for a completed booking (parent)
    GET /tutors/{tutor_id}           → Approved reviews for a tutor
    GET /tutors/{tutor_id}/summary   → Rating summary over approved reviews
    POST /{review_id}/approve        → Approve / feature a review (admin)
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies import (
    get_current_user,
    get_review_service,
    require_admin,
    require_user_type,
)
from ...core.config import settings
from ...core.enums import UserType
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import PaginatedResponse
from ...schemas.review import (
    ReviewCreate,
    ReviewModerationRequest,
    ReviewResponse,
    TutorRatingSummary,
)
from ...services.review_service import ReviewService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["reviews-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def submit_review(
    payload: ReviewCreate = Body(...),
    current_user: User = Depends(require_user_type(UserType.PARENT)),
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    try:
        review = await asyncio.to_thread(service.submit_review, current_user, payload)
        return ReviewResponse.model_validate(review)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/tutors/{tutor_id}", response_model=PaginatedResponse[ReviewResponse])
async def list_tutor_reviews(
    tutor_id: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    _user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
) -> PaginatedResponse[ReviewResponse]:
    reviews, total = await asyncio.to_thread(
        service.list_tutor_reviews, tutor_id, page=page, per_page=per_page
    )
    items = [ReviewResponse.model_validate(r) for r in reviews]
    return PaginatedResponse[ReviewResponse].build(items, total, page, per_page)


@router.get("/tutors/{tutor_id}/summary", response_model=TutorRatingSummary)
async def get_tutor_rating_summary(
    tutor_id: str,
    _user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
) -> TutorRatingSummary:
    try:
        summary = await asyncio.to_thread(service.get_rating_summary, tutor_id)
        return TutorRatingSummary(**summary)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{review_id}/approve", response_model=ReviewResponse)
async def approve_review(
    review_id: str,
    moderation: ReviewModerationRequest = Body(...),
    admin: User = Depends(require_admin),
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    try:
        review = await asyncio.to_thread(
            service.moderate_review,
            review_id,
            admin,
            is_approved=moderation.is_approved,
            is_featured=moderation.is_featured,
        )
        return ReviewResponse.model_validate(review)
    except DomainException as e:
        handle_domain_exception(e)
