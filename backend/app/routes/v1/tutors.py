# backend/app/routes/v1/tutors.py
"""
Tutor directory routes - API v1

Endpoints:
    GET / - Search active tutors
    PUT /me - Create or update the caller's tutor profile
    GET /{user_id} - One tutor's directory entry
"""

import asyncio
from decimal import Decimal
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies import get_current_user, get_tutor_service, require_user_type
from ...core.config import settings
from ...core.enums import UserType
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import PaginatedResponse
from ...schemas.tutor import TutorProfileUpsert, TutorSummary
from ...services.tutor_service import TutorService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tutors-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=PaginatedResponse[TutorSummary])
async def search_tutors(
    q: Optional[str] = Query(None, description="Matches name, bio and subjects"),
    subject: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    min_rate: Optional[Decimal] = Query(None, ge=0),
    max_rate: Optional[Decimal] = Query(None, ge=0),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    min_experience: Optional[int] = Query(None, ge=0),
    verified_only: bool = Query(False),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    _user: User = Depends(get_current_user),
    service: TutorService = Depends(get_tutor_service),
) -> PaginatedResponse[TutorSummary]:
    try:
        tutors, total = await asyncio.to_thread(
            service.search,
            query=q,
            subject=subject,
            location=location,
            min_rate=min_rate,
            max_rate=max_rate,
            min_rating=min_rating,
            min_experience=min_experience,
            verified_only=verified_only,
            page=page,
            per_page=per_page,
        )
    except DomainException as e:
        handle_domain_exception(e)
    items = [TutorSummary(**t) for t in tutors]
    return PaginatedResponse[TutorSummary].build(items, total, page, per_page)


@router.put("/me", response_model=TutorSummary)
async def upsert_my_profile(
    profile_data: TutorProfileUpsert = Body(...),
    current_user: User = Depends(require_user_type(UserType.TEACHER)),
    service: TutorService = Depends(get_tutor_service),
) -> TutorSummary:
    try:
        profile = await asyncio.to_thread(service.upsert_profile, current_user, profile_data)
        return TutorSummary(**profile)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{user_id}", response_model=TutorSummary)
async def get_tutor(
    user_id: str,
    _user: User = Depends(get_current_user),
    service: TutorService = Depends(get_tutor_service),
) -> TutorSummary:
    try:
        profile = await asyncio.to_thread(service.get_profile, user_id)
        return TutorSummary(**profile)
    except DomainException as e:
        handle_domain_exception(e)
