# backend/app/models/progress_report.py
"""Per-session progress reports written by tutors about a child."""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base


class ProgressReport(Base):
    """Tutor's assessment of one session with a child."""

    __tablename__ = "progress_reports"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    child_id = Column(
        String(26), ForeignKey("children.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tutor_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    booking_id = Column(String(26), ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True)

    subject = Column(String(100), nullable=False)
    session_date = Column(Date, nullable=False)
    progress_notes = Column(Text, nullable=True)
    skills_improved = Column(JSON, nullable=False, default=list)
    areas_for_improvement = Column(JSON, nullable=False, default=list)
    homework_completion = Column(Integer, nullable=True)
    attendance_rate = Column(Integer, nullable=True)
    overall_rating = Column(Integer, nullable=True)
    progress_percentage = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    child = relationship("Child", foreign_keys=[child_id])
    tutor = relationship("User", foreign_keys=[tutor_id])

    __table_args__ = (
        CheckConstraint(
            "homework_completion IS NULL OR (homework_completion >= 0 AND homework_completion <= 100)",
            name="ck_progress_homework_range",
        ),
        CheckConstraint(
            "attendance_rate IS NULL OR (attendance_rate >= 0 AND attendance_rate <= 100)",
            name="ck_progress_attendance_range",
        ),
        CheckConstraint(
            "overall_rating IS NULL OR (overall_rating >= 1 AND overall_rating <= 5)",
            name="ck_progress_rating_range",
        ),
        CheckConstraint(
            "progress_percentage IS NULL OR (progress_percentage >= 0 AND progress_percentage <= 100)",
            name="ck_progress_percentage_range",
        ),
        Index("ix_progress_reports_child_date", "child_id", "session_date"),
    )

    def __repr__(self) -> str:
        return f"<ProgressReport {self.id}: child={self.child_id} {self.subject} {self.session_date}>"
