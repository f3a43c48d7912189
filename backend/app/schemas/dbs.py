"""DBS certificate upload and review schemas."""

from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator

from ..core.constants import MAX_NOTE_LENGTH
from ..core.enums import DBSType
from ._strict_base import StrictModel, StrictRequestModel


class DBSCertificateMetadata(StrictRequestModel):
    """Form fields sent alongside the uploaded certificate file."""

    certificate_number: str = Field(..., min_length=1, max_length=50)
    dbs_type: DBSType = DBSType.ENHANCED
    issue_date: date
    expiry_date: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)

    @model_validator(mode="after")
    def _expiry_after_issue(self) -> "DBSCertificateMetadata":
        if self.expiry_date is not None and self.expiry_date < self.issue_date:
            raise ValueError("expiry_date cannot be before issue_date")
        return self


class DBSReviewRequest(StrictRequestModel):
    notes: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)


class DBSTutorSummary(StrictModel):
    id: str
    email: str
    full_name: Optional[str] = None


class DBSCheckResponse(StrictModel):
    id: str
    tutor_id: str
    certificate_number: str
    dbs_type: str
    issue_date: date
    expiry_date: Optional[date] = None
    status: str
    effective_status: str
    is_expiring_soon: bool = False
    document_url: Optional[str] = None
    content_type: Optional[str] = None
    file_size: Optional[int] = None
    uploaded_at: Optional[datetime] = None
    verified_at: Optional[datetime] = None
    verified_by: Optional[str] = None
    notes: Optional[str] = None
    tutor: Optional[DBSTutorSummary] = None

    @classmethod
    def from_record(
        cls, record: Any, *, today: date, expiring_window_days: int
    ) -> "DBSCheckResponse":
        """Build the response with the expiry-aware status as of ``today``."""
        tutor = record.tutor
        return cls(
            id=record.id,
            tutor_id=record.tutor_id,
            certificate_number=record.certificate_number,
            dbs_type=record.dbs_type,
            issue_date=record.issue_date,
            expiry_date=record.expiry_date,
            status=record.status,
            effective_status=record.effective_status(today),
            is_expiring_soon=record.is_expiring_soon(today, expiring_window_days),
            document_url=record.document_url,
            content_type=record.content_type,
            file_size=record.file_size,
            uploaded_at=record.uploaded_at,
            verified_at=record.verified_at,
            verified_by=record.verified_by,
            notes=record.notes,
            tutor=DBSTutorSummary.model_validate(tutor) if tutor is not None else None,
        )


class DBSStatsResponse(BaseModel):
    total: int
    by_status: Dict[str, int]
    expiring_soon: int


class ExpireOverdueResponse(BaseModel):
    expired: int
    as_of: date
