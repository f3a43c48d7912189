# backend/app/services/tutor_service.py
"""
Tutor directory service.

Teachers maintain their own profile; anyone authenticated can search the
directory. Column filters run in SQL, text and subject matching run here.
"""

from datetime import date
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from ..core.enums import DBSStatus, UserType
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..models.tutor_profile import TutorProfile
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..schemas.tutor import TutorProfileUpsert
from .base import BaseService

logger = logging.getLogger(__name__)


def _matches_text(profile: TutorProfile, query: str) -> bool:
    needle = query.lower()
    haystack = [profile.user.full_name or "", profile.bio or "", *(profile.subjects or [])]
    return any(needle in value.lower() for value in haystack)


def _teaches(profile: TutorProfile, subject: str) -> bool:
    wanted = subject.lower()
    return any(s.lower() == wanted for s in profile.subjects or [])


class TutorService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_tutor_profile_repository(db)
        self.review_repository = RepositoryFactory.create_review_repository(db)
        self.dbs_repository = RepositoryFactory.create_dbs_check_repository(db)

    def _summary(
        self, profile: TutorProfile, rating: Optional[float], verified: bool
    ) -> Dict[str, Any]:
        return {
            "user_id": profile.user_id,
            "full_name": profile.user.full_name if profile.user else None,
            "bio": profile.bio,
            "subjects": list(profile.subjects or []),
            "levels": list(profile.levels or []),
            "location": profile.location,
            "hourly_rate": profile.hourly_rate,
            "years_experience": profile.years_experience,
            "is_active": profile.is_active,
            "average_rating": round(rating, 1) if rating is not None else None,
            "dbs_verified": verified,
            "updated_at": profile.updated_at,
        }

    @BaseService.measure_operation("upsert_tutor_profile")
    def upsert_profile(self, tutor: User, data: TutorProfileUpsert) -> Dict[str, Any]:
        if tutor.user_type != UserType.TEACHER.value:
            raise ForbiddenException("Only tutors have a directory profile", code="TUTOR_ONLY")

        fields = data.model_dump()
        with self.transaction():
            profile = self.repository.get_by_user_id(tutor.id)
            if profile is None:
                profile = self.repository.create(user_id=tutor.id, **fields)
            else:
                self.repository.apply_changes(profile, **fields)
        return self.get_profile(tutor.id)

    def get_profile(self, user_id: str, today: Optional[date] = None) -> Dict[str, Any]:
        profile = self.repository.get_by_user_id(user_id)
        if profile is None:
            raise NotFoundException("Tutor not found", code="TUTOR_NOT_FOUND")
        ratings = self.review_repository.average_ratings_for_tutors([user_id])
        record = self.dbs_repository.get_by_tutor_id(user_id)
        verified = (
            record is not None
            and record.effective_status(today or self.today()) == DBSStatus.VERIFIED.value
        )
        return self._summary(profile, ratings.get(user_id), verified)

    @BaseService.measure_operation("search_tutors")
    def search(
        self,
        *,
        query: Optional[str] = None,
        subject: Optional[str] = None,
        location: Optional[str] = None,
        min_rate: Optional[Decimal] = None,
        max_rate: Optional[Decimal] = None,
        min_rating: Optional[float] = None,
        min_experience: Optional[int] = None,
        verified_only: bool = False,
        page: int = 1,
        per_page: int = 20,
        today: Optional[date] = None,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Active tutors matching every given filter.

        Results keep the repository order (most experienced first).
        """
        if min_rate is not None and max_rate is not None and min_rate > max_rate:
            raise ValidationException(
                "min_rate cannot exceed max_rate", code="INVALID_PRICE_RANGE"
            )

        candidates = self.repository.search_candidates(
            location=location,
            min_rate=min_rate,
            max_rate=max_rate,
            min_experience=min_experience,
        )
        if query:
            candidates = [p for p in candidates if _matches_text(p, query)]
        if subject:
            candidates = [p for p in candidates if _teaches(p, subject)]

        verified: Set[str] = set(self.dbs_repository.verified_tutor_ids(today or self.today()))
        if verified_only:
            candidates = [p for p in candidates if p.user_id in verified]

        ratings = self.review_repository.average_ratings_for_tutors(
            [p.user_id for p in candidates]
        )
        if min_rating is not None:
            candidates = [p for p in candidates if ratings.get(p.user_id, 0.0) >= min_rating]

        total = len(candidates)
        start = (page - 1) * per_page
        window = candidates[start : start + per_page]
        return (
            [self._summary(p, ratings.get(p.user_id), p.user_id in verified) for p in window],
            total,
        )
