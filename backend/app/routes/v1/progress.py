# backend/app/routes/v1/progress.py
"""
Progress report routes - API v1

Endpoints:
    POST / - Write a progress report (tutor)
    GET / - Reports visible to the caller
    GET /children/{child_id}/stats - Aggregated progress for a child
"""

import asyncio
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies import get_current_user, get_progress_service, require_user_type
from ...core.config import settings
from ...core.enums import ProgressTimeRange, UserType
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import PaginatedResponse
from ...schemas.progress import (
    ProgressReportCreate,
    ProgressReportResponse,
    ProgressStatsResponse,
)
from ...services.progress_service import ProgressService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["progress-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("", response_model=ProgressReportResponse, status_code=status.HTTP_201_CREATED)
async def create_progress_report(
    report_data: ProgressReportCreate = Body(...),
    current_user: User = Depends(require_user_type(UserType.TEACHER)),
    service: ProgressService = Depends(get_progress_service),
) -> ProgressReportResponse:
    try:
        report = await asyncio.to_thread(service.create_report, current_user, report_data)
        return ProgressReportResponse.model_validate(report)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=PaginatedResponse[ProgressReportResponse])
async def list_progress_reports(
    child_id: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service),
) -> PaginatedResponse[ProgressReportResponse]:
    try:
        reports, total = await asyncio.to_thread(
            service.list_reports, current_user, child_id=child_id, page=page, per_page=per_page
        )
    except DomainException as e:
        handle_domain_exception(e)
    items = [ProgressReportResponse.model_validate(r) for r in reports]
    return PaginatedResponse[ProgressReportResponse].build(items, total, page, per_page)


@router.get("/children/{child_id}/stats", response_model=ProgressStatsResponse)
async def get_child_progress_stats(
    child_id: str,
    time_range: ProgressTimeRange = Query(ProgressTimeRange.ALL),
    subject: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: ProgressService = Depends(get_progress_service),
) -> ProgressStatsResponse:
    try:
        stats = await asyncio.to_thread(
            service.get_stats,
            child_id,
            current_user,
            time_range=time_range.value,
            subject=subject,
        )
        return ProgressStatsResponse(**stats)
    except DomainException as e:
        handle_domain_exception(e)
