# backend/app/routes/v1/admin_dbs.py
"""
Admin DBS review routes - API v1

Endpoints:
    GET / - Search DBS records (status is evaluated against today's date)
    GET /stats - Counts per effective status and expiring soon
    POST /expire-overdue - Persist expired status on overdue records
    POST /{record_id}/verify - Verify a certificate
    POST /{record_id}/reject - Reject a certificate
"""

import asyncio
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies import get_dbs_verification_service, require_admin
from ...core.config import settings
from ...core.enums import DBSStatus, DBSType
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import PaginatedResponse
from ...schemas.dbs import (
    DBSCheckResponse,
    DBSReviewRequest,
    DBSStatsResponse,
    ExpireOverdueResponse,
)
from ...services.dbs_verification_service import DBSVerificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-dbs-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=PaginatedResponse[DBSCheckResponse])
async def list_dbs_records(
    search: Optional[str] = Query(None, description="Tutor name, email or certificate number"),
    status_filter: Optional[DBSStatus] = Query(None, alias="status"),
    dbs_type: Optional[DBSType] = Query(None),
    expiring_soon: bool = Query(False),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    _admin: User = Depends(require_admin),
    dbs_service: DBSVerificationService = Depends(get_dbs_verification_service),
) -> PaginatedResponse[DBSCheckResponse]:
    today = dbs_service.today()
    try:
        records, total = await asyncio.to_thread(
            dbs_service.list_records,
            search=search,
            status=status_filter.value if status_filter else None,
            dbs_type=dbs_type.value if dbs_type else None,
            expiring_soon=expiring_soon,
            page=page,
            per_page=per_page,
            today=today,
        )
    except DomainException as e:
        handle_domain_exception(e)

    items = [
        DBSCheckResponse.from_record(
            r, today=today, expiring_window_days=settings.dbs_expiring_soon_days
        )
        for r in records
    ]
    return PaginatedResponse[DBSCheckResponse].build(items, total, page, per_page)


@router.get("/stats", response_model=DBSStatsResponse)
async def get_dbs_stats(
    _admin: User = Depends(require_admin),
    dbs_service: DBSVerificationService = Depends(get_dbs_verification_service),
) -> DBSStatsResponse:
    stats = await asyncio.to_thread(dbs_service.get_stats)
    return DBSStatsResponse(**stats)


@router.post("/expire-overdue", response_model=ExpireOverdueResponse)
async def expire_overdue_records(
    _admin: User = Depends(require_admin),
    dbs_service: DBSVerificationService = Depends(get_dbs_verification_service),
) -> ExpireOverdueResponse:
    today = dbs_service.today()
    try:
        expired = await asyncio.to_thread(dbs_service.expire_overdue, today)
        return ExpireOverdueResponse(expired=expired, as_of=today)
    except DomainException as e:
        handle_domain_exception(e)


async def _review(
    record_id: str,
    decision: str,
    review: Optional[DBSReviewRequest],
    admin: User,
    dbs_service: DBSVerificationService,
) -> DBSCheckResponse:
    try:
        record = await asyncio.to_thread(
            dbs_service.review_certificate,
            record_id,
            admin,
            decision,
            review.notes if review else None,
        )
        return DBSCheckResponse.from_record(
            record,
            today=dbs_service.today(),
            expiring_window_days=settings.dbs_expiring_soon_days,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{record_id}/verify", response_model=DBSCheckResponse)
async def verify_dbs_record(
    record_id: str,
    review: Optional[DBSReviewRequest] = Body(None),
    admin: User = Depends(require_admin),
    dbs_service: DBSVerificationService = Depends(get_dbs_verification_service),
) -> DBSCheckResponse:
    return await _review(record_id, DBSStatus.VERIFIED.value, review, admin, dbs_service)


@router.post("/{record_id}/reject", response_model=DBSCheckResponse)
async def reject_dbs_record(
    record_id: str,
    review: Optional[DBSReviewRequest] = Body(None),
    admin: User = Depends(require_admin),
    dbs_service: DBSVerificationService = Depends(get_dbs_verification_service),
) -> DBSCheckResponse:
    return await _review(record_id, DBSStatus.REJECTED.value, review, admin, dbs_service)
