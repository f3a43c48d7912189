# backend/app/services/review_service.py
"""
ReviewService: business logic for reviews/ratings.

Implements:
- Eligibility and submission (parent's own completed booking, one per booking)
- Admin moderation (approve / feature)
- Public listing and rating summary over approved reviews only
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.enums import BookingStatus, UserType
from ..core.exceptions import (
    BusinessRuleException,
    DuplicateReviewException,
    ForbiddenException,
    NotFoundException,
)
from ..models.review import Review
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..schemas.review import ReviewCreate
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


def _round_or_none(value: Optional[float], digits: int = 1) -> Optional[float]:
    return round(value, digits) if value is not None else None


class ReviewService(BaseService):
    """Service layer for reviews & ratings."""

    def __init__(self, db: Session, notification_service: Optional[NotificationService] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_review_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.notification_service = notification_service or NotificationService(db)

    @BaseService.measure_operation("submit_review")
    def submit_review(self, reviewer: User, data: ReviewCreate) -> Review:
        """
        Create an unapproved review for a completed booking and notify the tutor.

        Raises:
            NotFoundException: booking missing or not the reviewer's own
            BusinessRuleException: booking not completed
            DuplicateReviewException: booking already reviewed
        """
        booking = self.booking_repository.get_by_id(data.booking_id)
        if booking is None or booking.parent_id != reviewer.id:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        if booking.status != BookingStatus.COMPLETED.value:
            raise BusinessRuleException(
                "Only completed sessions can be reviewed",
                code="BOOKING_NOT_COMPLETED",
                details={"booking_id": booking.id, "status": booking.status},
            )
        if self.repository.exists_for_booking(booking.id):
            raise DuplicateReviewException(booking.id)

        with self.transaction():
            review = self.repository.create(
                booking_id=booking.id,
                tutor_id=booking.tutor_id,
                reviewer_id=reviewer.id,
                child_id=booking.child_id,
                subject=booking.subject,
                is_approved=False,
                is_featured=False,
                **data.model_dump(exclude={"booking_id"}),
            )
            self.notification_service.notify_review_received(review, booking.subject)

        self.logger.info(f"Review {review.id} submitted for booking {booking.id}")
        return review

    @BaseService.measure_operation("moderate_review")
    def moderate_review(
        self,
        review_id: str,
        admin: User,
        *,
        is_approved: bool = True,
        is_featured: Optional[bool] = None,
    ) -> Review:
        if admin.user_type != UserType.ADMIN.value:
            raise ForbiddenException("Admin access required", code="ADMIN_ONLY")

        review = self.repository.get_by_id(review_id)
        if review is None:
            raise NotFoundException("Review not found", code="REVIEW_NOT_FOUND")

        changes = {"is_approved": is_approved}
        if is_featured is not None:
            changes["is_featured"] = is_featured
        with self.transaction():
            self.repository.apply_changes(review, **changes)
        return review

    def list_tutor_reviews(
        self, tutor_id: str, *, page: int = 1, per_page: int = 20
    ) -> Tuple[List[Review], int]:
        """Approved reviews, featured first."""
        return self.repository.list_for_tutor(
            tutor_id, approved_only=True, page=page, per_page=per_page
        )

    def get_rating_summary(self, tutor_id: str) -> dict:
        agg = self.repository.get_tutor_aggregates(tutor_id)
        recommend_percentage = None
        if agg["recommend_answers"]:
            recommend_percentage = round(
                100.0 * agg["recommend_yes"] / agg["recommend_answers"], 1
            )
        return {
            "tutor_id": tutor_id,
            "total_reviews": agg["total_reviews"],
            "average_rating": round(agg["average_overall"], 1),
            "average_teaching_quality": _round_or_none(agg["average_teaching_quality"]),
            "average_communication": _round_or_none(agg["average_communication"]),
            "average_punctuality": _round_or_none(agg["average_punctuality"]),
            "average_preparation": _round_or_none(agg["average_preparation"]),
            "recommend_percentage": recommend_percentage,
        }
