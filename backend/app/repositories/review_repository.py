# backend/app/repositories/review_repository.py
"""
Repository for the reviews/ratings system.

Follows repository pattern: no business logic, DB-only operations.
Aggregates only count approved reviews.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, TypedDict, cast

from sqlalchemy import and_, case, func
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.review import Review
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TutorAggregate(TypedDict):
    total_reviews: int
    average_overall: float
    average_teaching_quality: Optional[float]
    average_communication: Optional[float]
    average_punctuality: Optional[float]
    average_preparation: Optional[float]
    recommend_answers: int
    recommend_yes: int


def _avg_or_none(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


class ReviewRepository(BaseRepository[Review]):
    """Data access for `Review`."""

    def __init__(self, db: Session):
        super().__init__(db, Review)
        self.logger = logging.getLogger(__name__)

    def exists_for_booking(self, booking_id: str) -> bool:
        try:
            return (
                self.db.query(Review.id).filter(Review.booking_id == booking_id).first()
                is not None
            )
        except Exception as e:
            self.logger.error(f"Error checking review existence: {e}")
            raise RepositoryException(f"Failed to check review existence: {e}")

    def list_for_tutor(
        self, tutor_id: str, *, approved_only: bool = True, page: int = 1, per_page: int = 20
    ) -> Tuple[List[Review], int]:
        query = self.db.query(Review).filter(Review.tutor_id == tutor_id)
        if approved_only:
            query = query.filter(Review.is_approved.is_(True))
        query = query.order_by(
            Review.is_featured.desc(), Review.created_at.desc(), Review.id.desc()
        )
        return self._paginate(query, page, per_page)

    def get_tutor_aggregates(self, tutor_id: str) -> TutorAggregate:
        try:
            row = (
                self.db.query(
                    func.count(Review.id).label("total_reviews"),
                    func.avg(Review.overall_rating * 1.0).label("average_overall"),
                    func.avg(Review.teaching_quality * 1.0).label("average_teaching_quality"),
                    func.avg(Review.communication * 1.0).label("average_communication"),
                    func.avg(Review.punctuality * 1.0).label("average_punctuality"),
                    func.avg(Review.preparation * 1.0).label("average_preparation"),
                    func.count(Review.would_recommend).label("recommend_answers"),
                    func.sum(case((Review.would_recommend.is_(True), 1), else_=0)).label(
                        "recommend_yes"
                    ),
                )
                .filter(and_(Review.tutor_id == tutor_id, Review.is_approved.is_(True)))
                .first()
            )
            mapping: Mapping[str, Any] = cast(Row[Any], row)._mapping if row else {}
            return {
                "total_reviews": int(mapping.get("total_reviews", 0) or 0),
                "average_overall": float(mapping.get("average_overall", 0.0) or 0.0),
                "average_teaching_quality": _avg_or_none(mapping.get("average_teaching_quality")),
                "average_communication": _avg_or_none(mapping.get("average_communication")),
                "average_punctuality": _avg_or_none(mapping.get("average_punctuality")),
                "average_preparation": _avg_or_none(mapping.get("average_preparation")),
                "recommend_answers": int(mapping.get("recommend_answers", 0) or 0),
                "recommend_yes": int(mapping.get("recommend_yes", 0) or 0),
            }
        except Exception as e:
            self.logger.error(f"Error aggregating tutor reviews: {e}")
            raise RepositoryException(f"Failed to aggregate reviews: {e}")

    def average_ratings_for_tutors(self, tutor_ids: Sequence[str]) -> Dict[str, float]:
        """Approved-review average per tutor; tutors without reviews are absent."""
        if not tutor_ids:
            return {}
        rows = (
            self.db.query(Review.tutor_id, func.avg(Review.overall_rating * 1.0))
            .filter(Review.tutor_id.in_(list(tutor_ids)), Review.is_approved.is_(True))
            .group_by(Review.tutor_id)
            .all()
        )
        return {tutor_id: float(avg) for tutor_id, avg in rows if avg is not None}
