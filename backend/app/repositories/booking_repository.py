# backend/app/repositories/booking_repository.py
"""
Booking Repository for the TutorHub platform.

This repository handles:
- Booking CRUD operations
- Party-scoped listing with status/child/subject/date filters
- Upcoming vs past windows relative to a caller-supplied "today"
- Status counts and completed-session aggregates for statistics
"""

from datetime import date
from decimal import Decimal
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.enums import BookingStatus
from ..core.exceptions import RepositoryException
from ..models.booking import Booking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def _party_filter(self, query: Query, user_id: Optional[str]) -> Query:
        # None means an unscoped (admin) view
        if user_id is None:
            return query
        return query.filter(or_(Booking.parent_id == user_id, Booking.tutor_id == user_id))

    def list_for_user(
        self,
        user_id: Optional[str],
        *,
        today: date,
        status: Optional[str] = None,
        child_id: Optional[str] = None,
        subject: Optional[str] = None,
        tutor_id: Optional[str] = None,
        when: str = "all",
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
        per_page: int = 20,
    ) -> Tuple[List[Booking], int]:
        """
        Page through bookings where ``user_id`` is a party.

        Args:
            user_id: Party to scope to, or None for every booking
            today: Reference date for the upcoming/past split
            when: "upcoming" (scheduled today or later), "past" or "all"

        Returns:
            (bookings, total) with upcoming/all ordered soonest first and past
            ordered most recent first
        """
        query = self._party_filter(self.db.query(Booking), user_id)

        if status:
            query = query.filter(Booking.status == status)
        if child_id:
            query = query.filter(Booking.child_id == child_id)
        if subject:
            query = query.filter(func.lower(Booking.subject) == subject.lower())
        if tutor_id:
            query = query.filter(Booking.tutor_id == tutor_id)
        if date_from:
            query = query.filter(Booking.scheduled_date >= date_from)
        if date_to:
            query = query.filter(Booking.scheduled_date <= date_to)

        if when == "upcoming":
            query = query.filter(Booking.scheduled_date >= today)
        elif when == "past":
            query = query.filter(Booking.scheduled_date < today)

        if when == "past":
            query = query.order_by(Booking.scheduled_date.desc(), Booking.scheduled_time.desc())
        else:
            query = query.order_by(Booking.scheduled_date.asc(), Booking.scheduled_time.asc())

        return self._paginate(query, page, per_page)

    def count_by_status(self, user_id: Optional[str]) -> Dict[str, int]:
        """Booking counts per status, with every status present."""
        try:
            query = self.db.query(Booking.status, func.count(Booking.id).label("count"))
            rows = self._party_filter(query, user_id).group_by(Booking.status).all()

            status_counts = {s.value: 0 for s in BookingStatus}
            for row in rows:
                if row.status:
                    status_counts[row.status] = row.count
            return status_counts
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting bookings by status: {str(e)}")
            raise RepositoryException(f"Failed to count bookings by status: {str(e)}")

    def count_upcoming(self, user_id: Optional[str], today: date) -> int:
        try:
            query = self._party_filter(self.db.query(func.count(Booking.id)), user_id).filter(
                Booking.scheduled_date >= today,
                Booking.status.in_(
                    [
                        BookingStatus.PENDING.value,
                        BookingStatus.CONFIRMED.value,
                        BookingStatus.RESCHEDULED.value,
                    ]
                ),
            )
            return int(query.scalar() or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting upcoming bookings: {str(e)}")
            raise RepositoryException(f"Failed to count upcoming bookings: {str(e)}")

    def completed_totals(self, user_id: Optional[str]) -> Tuple[int, Decimal]:
        """Total minutes and summed fees of completed bookings."""
        try:
            query = self._party_filter(
                self.db.query(
                    func.coalesce(func.sum(Booking.duration_minutes), 0),
                    func.coalesce(func.sum(Booking.session_fee), 0),
                ),
                user_id,
            ).filter(Booking.status == BookingStatus.COMPLETED.value)
            minutes, fees = query.one()
            return int(minutes or 0), Decimal(str(fees or 0))
        except SQLAlchemyError as e:
            self.logger.error(f"Error summing completed bookings: {str(e)}")
            raise RepositoryException(f"Failed to aggregate completed bookings: {str(e)}")

    def has_booking_between(
        self, tutor_id: str, child_id: str, exclude_cancelled: bool = True
    ) -> bool:
        """True when the tutor has (had) a booking with the child."""
        query = self.db.query(Booking.id).filter(
            Booking.tutor_id == tutor_id, Booking.child_id == child_id
        )
        if exclude_cancelled:
            query = query.filter(Booking.status != BookingStatus.CANCELLED.value)
        return query.first() is not None
