# backend/app/routes/v1/dbs.py
"""
Tutor DBS certificate routes - API v1

Endpoints:
    POST / - Upload (or replace) the caller's DBS certificate
    GET /me - The caller's current DBS record
"""

import asyncio
from datetime import date
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError

from ...api.dependencies import get_dbs_verification_service, require_user_type
from ...core.config import settings
from ...core.enums import DBSType, UserType
from ...core.exceptions import HTTP_422_UNPROCESSABLE, DomainException
from ...models.user import User
from ...schemas.dbs import DBSCertificateMetadata, DBSCheckResponse
from ...services.dbs_verification_service import DBSVerificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dbs-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("", response_model=DBSCheckResponse, status_code=status.HTTP_201_CREATED)
async def upload_dbs_certificate(
    file: UploadFile = File(...),
    certificate_number: str = Form(...),
    dbs_type: DBSType = Form(DBSType.ENHANCED),
    issue_date: date = Form(...),
    expiry_date: Optional[date] = Form(None),
    notes: Optional[str] = Form(None),
    current_user: User = Depends(require_user_type(UserType.TEACHER)),
    dbs_service: DBSVerificationService = Depends(get_dbs_verification_service),
) -> DBSCheckResponse:
    """Upload a certificate; the record returns to pending review."""
    try:
        metadata = DBSCertificateMetadata(
            certificate_number=certificate_number,
            dbs_type=dbs_type,
            issue_date=issue_date,
            expiry_date=expiry_date,
            notes=notes,
        )
    except ValidationError as exc:
        raise HTTPException(
            status_code=HTTP_422_UNPROCESSABLE,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc

    # One byte past the limit is enough to reject oversized files
    data = await file.read(settings.dbs_max_upload_bytes + 1)
    await file.close()

    try:
        record = await asyncio.to_thread(
            dbs_service.upload_certificate, current_user, data, file.content_type, metadata
        )
        return DBSCheckResponse.from_record(
            record,
            today=dbs_service.today(),
            expiring_window_days=settings.dbs_expiring_soon_days,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/me", response_model=Optional[DBSCheckResponse])
async def get_my_dbs_record(
    current_user: User = Depends(require_user_type(UserType.TEACHER)),
    dbs_service: DBSVerificationService = Depends(get_dbs_verification_service),
) -> Optional[DBSCheckResponse]:
    """The caller's record, or null when nothing has been uploaded yet."""
    record = await asyncio.to_thread(dbs_service.get_for_tutor, current_user)
    if record is None:
        return None
    return DBSCheckResponse.from_record(
        record,
        today=dbs_service.today(),
        expiring_window_days=settings.dbs_expiring_soon_days,
    )
