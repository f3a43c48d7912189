# backend/app/models/dbs_check.py
"""
DBS certificate records.

Each tutor has at most one current record. Uploading a new certificate
replaces the document and resets the record to pending review.
"""

from datetime import date

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core import dbs_policy
from ..core.enums import DBSStatus, DBSType
from ..database import Base


class DBSCheck(Base):
    """Uploaded DBS certificate and its verification state."""

    __tablename__ = "dbs_checks"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    tutor_id = Column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    certificate_number = Column(String(50), nullable=False, index=True)
    dbs_type = Column(String(20), nullable=False, default=DBSType.ENHANCED.value)
    issue_date = Column(Date, nullable=False)
    expiry_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default=DBSStatus.PENDING.value, index=True)

    # Stored document
    document_key = Column(String(255), nullable=True)
    document_url = Column(Text, nullable=True)
    content_type = Column(String(100), nullable=True)
    file_size = Column(Integer, nullable=True)
    uploaded_at = Column(DateTime(timezone=True), nullable=True)

    # Review stamps
    verified_at = Column(DateTime(timezone=True), nullable=True)
    verified_by = Column(String(26), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    tutor = relationship("User", foreign_keys=[tutor_id])
    reviewer = relationship("User", foreign_keys=[verified_by])

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'verified', 'rejected', 'expired')",
            name="ck_dbs_checks_status",
        ),
        CheckConstraint(
            "dbs_type IN ('basic', 'standard', 'enhanced', 'enhanced_barred')",
            name="ck_dbs_checks_type",
        ),
    )

    def __repr__(self) -> str:
        return f"<DBSCheck {self.id}: tutor={self.tutor_id} status={self.status}>"

    def effective_status(self, today: date) -> str:
        """Stored status, overridden by ``expired`` once the expiry date has passed."""
        return dbs_policy.effective_status(str(self.status), self.expiry_date, today)

    def is_expiring_soon(self, today: date, window_days: int) -> bool:
        return dbs_policy.is_expiring_soon(self.expiry_date, today, window_days)
