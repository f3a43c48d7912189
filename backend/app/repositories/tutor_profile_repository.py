# backend/app/repositories/tutor_profile_repository.py
"""
Tutor profile repository.

Directory queries apply the column-level filters (location, price range,
experience) in SQL. Free text and subject matching over the JSON subject
list are left to the service so behaviour is identical on every dialect.
"""

from decimal import Decimal
import logging
from typing import List, Optional, cast

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ..models.tutor_profile import TutorProfile
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TutorProfileRepository(BaseRepository[TutorProfile]):
    def __init__(self, db: Session):
        super().__init__(db, TutorProfile)

    def get_by_user_id(self, user_id: str) -> Optional[TutorProfile]:
        return cast(
            Optional[TutorProfile],
            self.db.query(TutorProfile)
            .options(joinedload(TutorProfile.user))
            .filter(TutorProfile.user_id == user_id)
            .first(),
        )

    def search_candidates(
        self,
        *,
        location: Optional[str] = None,
        min_rate: Optional[Decimal] = None,
        max_rate: Optional[Decimal] = None,
        min_experience: Optional[int] = None,
    ) -> List[TutorProfile]:
        """Active profiles of active teachers matching the column filters."""
        query = (
            self.db.query(TutorProfile)
            .join(User, User.id == TutorProfile.user_id)
            .options(joinedload(TutorProfile.user))
            .filter(TutorProfile.is_active.is_(True), User.is_active.is_(True))
        )
        if location:
            query = query.filter(func.lower(TutorProfile.location).contains(location.lower()))
        if min_rate is not None:
            query = query.filter(TutorProfile.hourly_rate >= min_rate)
        if max_rate is not None:
            query = query.filter(TutorProfile.hourly_rate <= max_rate)
        if min_experience is not None:
            query = query.filter(TutorProfile.years_experience >= min_experience)

        query = query.order_by(TutorProfile.years_experience.desc(), TutorProfile.id.asc())
        return cast(List[TutorProfile], self._execute_query(query))
