# backend/app/services/dbs_verification_service.py
"""
DBS Verification Service.

Tutors upload a DBS certificate (file plus metadata); admins verify or
reject it. Expiry is evaluated against "today" on every read: a record past
its expiry date reports ``expired`` whatever its stored status is, and
``expire_overdue`` persists that state in bulk.

State machine (stored status):
    (none) --upload--> pending --review--> verified | rejected
    any    --upload--> pending            (replacement clears review stamps)
    pending/verified --expiry passes--> expired
"""

from __future__ import annotations

from datetime import date, datetime, timezone
import logging
from typing import Dict, List, Optional, Protocol, Tuple, cast

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import CONTENT_TYPE_EXTENSIONS, DBS_CERTIFICATE_PREFIX
from ..core.enums import DBSStatus, UserType
from ..core.exceptions import (
    CertificateUploadException,
    ForbiddenException,
    NotFoundException,
    ServiceException,
    ValidationException,
)
from ..models.dbs_check import DBSCheck
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..schemas.dbs import DBSCertificateMetadata
from .base import BaseService
from .notification_service import NotificationService
from .r2_storage_client import StorageUploadError

logger = logging.getLogger(__name__)

REVIEW_DECISIONS = (DBSStatus.VERIFIED.value, DBSStatus.REJECTED.value)


class CertificateStorage(Protocol):
    def upload_bytes(self, object_key: str, data: bytes, content_type: str) -> str: ...

    def document_url(self, object_key: str, expires_seconds: int = 3600) -> str: ...

    def delete_object(self, object_key: str) -> bool: ...


def build_object_key(tutor_id: str, content_type: str, now: Optional[datetime] = None) -> str:
    """``dbs-certificates/<tutor_id>-dbs-<epoch millis>.<ext>``"""
    stamp = int((now or datetime.now(timezone.utc)).timestamp() * 1000)
    extension = CONTENT_TYPE_EXTENSIONS.get(content_type, "bin")
    return f"{DBS_CERTIFICATE_PREFIX}/{tutor_id}-dbs-{stamp}.{extension}"


class DBSVerificationService(BaseService):
    """Upload, review and expiry handling for DBS certificates."""

    def __init__(
        self,
        db: Session,
        storage: CertificateStorage,
        notification_service: Optional[NotificationService] = None,
    ):
        super().__init__(db)
        self.storage = storage
        self.notification_service = notification_service or NotificationService(db)
        self.repository = RepositoryFactory.create_dbs_check_repository(db)

    # Upload

    @staticmethod
    def validate_file(content_type: Optional[str], size: int) -> None:
        """
        Enforce the accepted MIME types and the size limit.

        Raises:
            CertificateUploadException: UNSUPPORTED_FILE_TYPE, EMPTY_FILE or FILE_TOO_LARGE
        """
        allowed = settings.dbs_content_types
        if content_type not in allowed:
            raise CertificateUploadException(
                "Please upload a PDF, JPEG, or PNG file",
                code="UNSUPPORTED_FILE_TYPE",
                details={"content_type": content_type, "allowed": allowed},
            )
        if size <= 0:
            raise CertificateUploadException("The uploaded file is empty", code="EMPTY_FILE")
        if size > settings.dbs_max_upload_bytes:
            raise CertificateUploadException(
                f"File size must be less than {settings.dbs_max_upload_bytes / (1024 * 1024):g}MB",
                code="FILE_TOO_LARGE",
                details={"size": size, "max_bytes": settings.dbs_max_upload_bytes},
            )

    @BaseService.measure_operation("upload_dbs_certificate")
    def upload_certificate(
        self,
        tutor: User,
        data: bytes,
        content_type: Optional[str],
        metadata: DBSCertificateMetadata,
    ) -> DBSCheck:
        """
        Store the certificate file and upsert the tutor's record as pending.

        The file is validated before anything is written. A replacement upload
        clears the previous review stamps and removes the previous document.
        """
        if tutor.user_type != UserType.TEACHER.value:
            raise ForbiddenException("Only tutors can upload DBS certificates", code="TUTOR_ONLY")

        self.validate_file(content_type, len(data))
        content_type = cast(str, content_type)

        object_key = build_object_key(tutor.id, content_type)
        try:
            self.storage.upload_bytes(object_key, data, content_type)
        except StorageUploadError as e:
            raise ServiceException(
                "Failed to upload DBS certificate", code="STORAGE_UPLOAD_FAILED"
            ) from e

        fields = {
            "certificate_number": metadata.certificate_number,
            "dbs_type": metadata.dbs_type,
            "issue_date": metadata.issue_date,
            "expiry_date": metadata.expiry_date,
            "notes": metadata.notes,
            "status": DBSStatus.PENDING.value,
            "document_key": object_key,
            "document_url": self.storage.document_url(object_key),
            "content_type": content_type,
            "file_size": len(data),
            "uploaded_at": datetime.now(timezone.utc),
            "verified_at": None,
            "verified_by": None,
        }

        previous_key: Optional[str] = None
        try:
            with self.transaction():
                record = self.repository.get_by_tutor_id(tutor.id)
                if record is None:
                    record = self.repository.create(tutor_id=tutor.id, **fields)
                else:
                    previous_key = record.document_key
                    self.repository.apply_changes(record, **fields)
                self.notification_service.notify_admins_dbs_submitted(record, tutor)
        except ServiceException:
            # Do not leave an orphaned blob behind a failed write
            self.storage.delete_object(object_key)
            raise

        if previous_key and previous_key != object_key:
            self.storage.delete_object(previous_key)

        self.logger.info(f"DBS certificate uploaded for tutor {tutor.id} as {object_key}")
        return record

    # Reads

    def get_for_tutor(self, tutor: User) -> Optional[DBSCheck]:
        return self.repository.get_by_tutor_id(tutor.id)

    def effective_status(self, record: DBSCheck, today: Optional[date] = None) -> str:
        return record.effective_status(today or self.today())

    def is_expiring_soon(self, record: DBSCheck, today: Optional[date] = None) -> bool:
        return record.is_expiring_soon(today or self.today(), settings.dbs_expiring_soon_days)

    def is_tutor_verified(self, tutor_id: str, today: Optional[date] = None) -> bool:
        record = self.repository.get_by_tutor_id(tutor_id)
        if record is None:
            return False
        return record.effective_status(today or self.today()) == DBSStatus.VERIFIED.value

    def verified_tutor_ids(self, today: Optional[date] = None) -> List[str]:
        return self.repository.verified_tutor_ids(today or self.today())

    # Admin

    @BaseService.measure_operation("review_dbs_certificate")
    def review_certificate(
        self, record_id: str, admin: User, decision: str, notes: Optional[str] = None
    ) -> DBSCheck:
        """
        Verify or reject a certificate.

        Stamps the reviewer and time, keeps the existing notes when none are
        given and notifies the tutor in the same transaction.
        """
        if admin.user_type != UserType.ADMIN.value:
            raise ForbiddenException("Admin access required", code="ADMIN_ONLY")
        if decision not in REVIEW_DECISIONS:
            raise ValidationException(
                f"Invalid review decision: {decision}",
                code="INVALID_DECISION",
                details={"allowed": list(REVIEW_DECISIONS)},
            )

        record = self.repository.get_by_id(record_id)
        if record is None:
            raise NotFoundException("DBS record not found", code="DBS_RECORD_NOT_FOUND")

        with self.transaction():
            self.repository.apply_changes(
                record,
                status=decision,
                verified_at=datetime.now(timezone.utc),
                verified_by=admin.id,
                notes=notes if notes else record.notes,
            )
            self.notification_service.notify_dbs_reviewed(record)

        prometheus_metrics.inc_dbs_review(decision)
        self.logger.info(f"DBS record {record.id} {decision} by admin {admin.id}")
        return record

    @BaseService.measure_operation("list_dbs_records")
    def list_records(
        self,
        *,
        search: Optional[str] = None,
        status: Optional[str] = None,
        dbs_type: Optional[str] = None,
        expiring_soon: bool = False,
        page: int = 1,
        per_page: int = 20,
        today: Optional[date] = None,
    ) -> Tuple[List[DBSCheck], int]:
        return self.repository.list_for_admin(
            today=today or self.today(),
            search=search,
            status=status,
            dbs_type=dbs_type,
            expiring_within_days=settings.dbs_expiring_soon_days if expiring_soon else None,
            page=page,
            per_page=per_page,
        )

    def get_stats(self, today: Optional[date] = None) -> Dict[str, object]:
        today = today or self.today()
        by_status = self.repository.count_by_effective_status(today)
        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "expiring_soon": self.repository.count_expiring_soon(
                today, settings.dbs_expiring_soon_days
            ),
        }

    @BaseService.measure_operation("expire_overdue_dbs")
    def expire_overdue(self, today: Optional[date] = None) -> int:
        """Persist ``expired`` on every pending/verified record past its expiry date."""
        with self.transaction():
            count = self.repository.mark_overdue_expired(today or self.today())
        if count:
            self.logger.info(f"Marked {count} DBS records as expired")
        return count
