# backend/app/models/review.py
"""
Review model for TutorHub.

Design notes:
- One review per booking (DB unique constraint on booking_id)
- Reviews start unapproved; only approved reviews are public and aggregated
- Sub-ratings are optional, overall rating is required
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class Review(Base):
    """Per-booking review submitted by a parent."""

    __tablename__ = "reviews"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))

    booking_id = Column(
        String(26), ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True
    )
    tutor_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    reviewer_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    child_id = Column(String(26), ForeignKey("children.id", ondelete="SET NULL"), nullable=True)
    subject = Column(String(100), nullable=True)

    # Rating data
    overall_rating = Column(Integer, nullable=False)
    teaching_quality = Column(Integer, nullable=True)
    communication = Column(Integer, nullable=True)
    punctuality = Column(Integer, nullable=True)
    preparation = Column(Integer, nullable=True)

    review_title = Column(String(200), nullable=True)
    review_content = Column(Text, nullable=True)
    what_went_well = Column(Text, nullable=True)
    areas_for_improvement = Column(Text, nullable=True)
    would_recommend = Column(Boolean, nullable=True)

    # Moderation
    is_approved = Column(Boolean, nullable=False, default=False)
    is_featured = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=lambda: datetime.now(timezone.utc),
    )

    booking = relationship("Booking", foreign_keys=[booking_id])
    tutor = relationship("User", foreign_keys=[tutor_id])
    reviewer = relationship("User", foreign_keys=[reviewer_id])

    __table_args__ = (
        UniqueConstraint("booking_id", name="uq_reviews_booking"),
        CheckConstraint(
            "overall_rating >= 1 AND overall_rating <= 5", name="ck_reviews_rating_range"
        ),
        CheckConstraint(
            "teaching_quality IS NULL OR (teaching_quality >= 1 AND teaching_quality <= 5)",
            name="ck_reviews_teaching_quality_range",
        ),
        CheckConstraint(
            "communication IS NULL OR (communication >= 1 AND communication <= 5)",
            name="ck_reviews_communication_range",
        ),
        CheckConstraint(
            "punctuality IS NULL OR (punctuality >= 1 AND punctuality <= 5)",
            name="ck_reviews_punctuality_range",
        ),
        CheckConstraint(
            "preparation IS NULL OR (preparation >= 1 AND preparation <= 5)",
            name="ck_reviews_preparation_range",
        ),
        Index("idx_reviews_tutor_approved", "tutor_id", "is_approved"),
    )

    def __repr__(self) -> str:
        return f"<Review {self.id}: tutor={self.tutor_id} rating={self.overall_rating}>"
