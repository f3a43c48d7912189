# backend/app/services/booking_service.py
"""
Booking Service for the TutorHub platform.

Handles all booking-related business logic including:
- Creating booking requests on behalf of parents
- The status workflow (confirm, cancel, complete, reschedule, no-show)
- Counterparty notifications written in the same unit of work
- Party-scoped listing and statistics
"""

from __future__ import annotations

from datetime import date, datetime, timezone
import logging
from typing import TYPE_CHECKING, Dict, FrozenSet, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import BookingStatus, PartyRole, UserType
from ..core.exceptions import (
    BusinessRuleException,
    ForbiddenException,
    InvalidStatusTransitionException,
    NotFoundException,
    ValidationException,
)
from ..models.booking import Booking
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..schemas.booking import BookingCreate, BookingUpdate
from .base import BaseService
from .notification_service import NotificationService

if TYPE_CHECKING:
    from ..repositories.booking_repository import BookingRepository

logger = logging.getLogger(__name__)

_S = BookingStatus

# Same-status re-application is always allowed and is not listed here
ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    _S.PENDING: frozenset({_S.CONFIRMED, _S.CANCELLED, _S.RESCHEDULED}),
    _S.CONFIRMED: frozenset({_S.COMPLETED, _S.CANCELLED, _S.RESCHEDULED, _S.NO_SHOW}),
    _S.RESCHEDULED: frozenset({_S.PENDING, _S.CONFIRMED, _S.CANCELLED}),
    _S.COMPLETED: frozenset(),
    _S.CANCELLED: frozenset(),
    _S.NO_SHOW: frozenset(),
}

TUTOR_ONLY_STATUSES = frozenset({_S.COMPLETED, _S.NO_SHOW})
EDITABLE_STATUSES = frozenset({_S.PENDING.value, _S.RESCHEDULED.value})
SCHEDULE_FIELDS = frozenset({"scheduled_date", "scheduled_time", "duration_minutes"})


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Every write that produces a notification runs inside one transaction:
    the booking change and the notification rows commit or roll back together.
    """

    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
        repository: Optional["BookingRepository"] = None,
    ):
        super().__init__(db)
        self.notification_service = notification_service or NotificationService(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.child_repository = RepositoryFactory.create_child_repository(db)

    # Access helpers

    def _get_or_404(self, booking_id: str) -> Booking:
        booking = self.repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException(
                "Booking not found", code="BOOKING_NOT_FOUND", details={"booking_id": booking_id}
            )
        return booking

    @staticmethod
    def resolve_role(booking: Booking, user: User) -> PartyRole:
        """Role the caller plays on ``booking``; non-parties are rejected."""
        role = booking.role_of(user.id)
        if role is not None:
            return role
        if user.user_type == UserType.ADMIN.value:
            return PartyRole.ADMIN
        raise ForbiddenException(
            "You are not a party to this booking", code="NOT_BOOKING_PARTY"
        )

    def _check_duration(self, duration_minutes: Optional[int]) -> None:
        limit = settings.booking_max_duration_minutes
        if duration_minutes is not None and duration_minutes > limit:
            raise ValidationException(
                f"Duration cannot exceed {limit} minutes",
                code="INVALID_DURATION",
                details={"duration_minutes": duration_minutes, "max": limit},
            )

    # Creation

    @BaseService.measure_operation("create_booking")
    def create_booking(self, parent: User, booking_data: BookingCreate) -> Booking:
        """
        Create a booking request from a parent.

        The booking starts pending with the parent's confirmation recorded,
        whatever status the client sent. The tutor receives a
        ``booking_request`` notification in the same transaction.

        Raises:
            ForbiddenException: caller is not a parent
            NotFoundException: tutor or child does not exist (or child is not theirs)
        """
        if parent.user_type != UserType.PARENT.value:
            raise ForbiddenException("Only parents can create bookings", code="PARENT_ONLY")

        tutor = self.user_repository.get_by_id(booking_data.tutor_id)
        if tutor is None or not tutor.is_active or tutor.user_type != UserType.TEACHER.value:
            raise NotFoundException(
                "Tutor not found", code="TUTOR_NOT_FOUND", details={"tutor_id": booking_data.tutor_id}
            )

        if booking_data.child_id is not None:
            child = self.child_repository.get_for_parent(booking_data.child_id, parent.id)
            if child is None:
                raise NotFoundException(
                    "Child not found",
                    code="CHILD_NOT_FOUND",
                    details={"child_id": booking_data.child_id},
                )

        self._check_duration(booking_data.duration_minutes)

        with self.transaction():
            booking = self.repository.create(
                parent_id=parent.id,
                tutor_id=tutor.id,
                child_id=booking_data.child_id,
                subject=booking_data.subject,
                session_type=booking_data.session_type,
                scheduled_date=booking_data.scheduled_date,
                scheduled_time=booking_data.scheduled_time,
                duration_minutes=booking_data.duration_minutes,
                session_format=booking_data.session_format,
                location=booking_data.location,
                session_fee=booking_data.session_fee,
                special_requirements=booking_data.special_requirements,
                status=BookingStatus.PENDING.value,
                parent_confirmed=True,
                tutor_confirmed=False,
            )
            self.notification_service.notify_booking_request(booking)

        self.logger.info(
            f"Booking {booking.id} ({booking.booking_reference}) requested by parent "
            f"{parent.id} with tutor {tutor.id}"
        )
        return booking

    # Reads

    @BaseService.measure_operation("get_booking")
    def get_booking(self, booking_id: str, user: User) -> Booking:
        booking = self._get_or_404(booking_id)
        self.resolve_role(booking, user)
        return booking

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        user: User,
        *,
        status: Optional[str] = None,
        child_id: Optional[str] = None,
        subject: Optional[str] = None,
        tutor_id: Optional[str] = None,
        when: str = "all",
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
        per_page: int = 20,
        today: Optional[date] = None,
    ) -> Tuple[List[Booking], int]:
        """Bookings the caller is a party to (every booking for admins)."""
        scope = None if user.user_type == UserType.ADMIN.value else user.id
        return self.repository.list_for_user(
            scope,
            today=today or self.today(),
            status=status,
            child_id=child_id,
            subject=subject,
            tutor_id=tutor_id,
            when=when,
            date_from=date_from,
            date_to=date_to,
            page=page,
            per_page=per_page,
        )

    @BaseService.measure_operation("get_booking_stats")
    def get_booking_stats(self, user: User, today: Optional[date] = None) -> Dict[str, object]:
        scope = None if user.user_type == UserType.ADMIN.value else user.id
        by_status = self.repository.count_by_status(scope)
        minutes, fees = self.repository.completed_totals(scope)
        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "upcoming": self.repository.count_upcoming(scope, today or self.today()),
            "completed_hours": round(minutes / 60, 2),
            "total_completed_fees": fees,
        }

    # Status workflow

    @BaseService.measure_operation("update_booking_status")
    def update_booking_status(
        self,
        booking_id: str,
        target_status: str,
        user: User,
        reason: Optional[str] = None,
    ) -> Booking:
        """
        Move a booking to ``target_status`` on behalf of ``user``.

        The caller's role comes from their relation to the booking. Confirming
        records that role's confirmation flag; with dual confirmation enabled
        the status only becomes confirmed once both flags are set. Exactly one
        notification goes to the counterparty (both parties for admin actions),
        also when the status is re-applied unchanged. A confirmation held back
        by the dual-confirmation gate sends ``booking_awaiting_confirmation``
        instead of ``booking_confirmed``.

        Raises:
            ValidationException: unknown status
            NotFoundException: booking does not exist
            ForbiddenException: caller is not a party, or a parent tries a tutor-only status
            InvalidStatusTransitionException: move not allowed from the current status
        """
        try:
            target = BookingStatus(target_status)
        except ValueError:
            raise ValidationException(
                f"Invalid booking status: {target_status}",
                code="INVALID_STATUS",
                details={"allowed": [s.value for s in BookingStatus]},
            )

        booking = self._get_or_404(booking_id)
        role = self.resolve_role(booking, user)

        if target in TUTOR_ONLY_STATUSES and role == PartyRole.PARENT:
            raise ForbiddenException(
                f"Only the tutor can mark a booking as {target.value}",
                code="TUTOR_ACTION_ONLY",
            )

        current = BookingStatus(booking.status)
        if settings.booking_enforce_transitions and not can_transition(current, target):
            raise InvalidStatusTransitionException(booking.id, current.value, target.value)

        with self.transaction():
            self._apply_status(booking, current, target, role, user, reason)
            self.db.flush()
            if target == BookingStatus.CONFIRMED and booking.status != target.value:
                # Held back until the other party confirms too
                self.notification_service.notify_awaiting_confirmation(booking, role)
            else:
                self.notification_service.notify_booking_status(booking, target.value, role)

        prometheus_metrics.inc_booking_status_change(target.value, role.value)
        self.logger.info(
            f"Booking {booking.id} status {current.value} -> {booking.status} "
            f"(requested {target.value}) by {role.value} {user.id}"
        )
        return booking

    def _apply_status(
        self,
        booking: Booking,
        current: BookingStatus,
        target: BookingStatus,
        role: PartyRole,
        user: User,
        reason: Optional[str],
    ) -> None:
        now = datetime.now(timezone.utc)

        if target == BookingStatus.CONFIRMED:
            booking.record_confirmation(role)
            if settings.booking_require_dual_confirmation and not booking.is_fully_confirmed:
                return
            booking.status = BookingStatus.CONFIRMED.value
            if booking.confirmed_at is None:
                booking.confirmed_at = now
            return

        if current == target:
            return

        if target == BookingStatus.CANCELLED:
            booking.cancel(user.id, reason)
        elif target == BookingStatus.COMPLETED:
            booking.complete()
        else:
            booking.status = target.value
            if target in (BookingStatus.PENDING, BookingStatus.RESCHEDULED):
                # A new schedule needs the tutor's confirmation again
                booking.tutor_confirmed = role == PartyRole.TUTOR
                booking.parent_confirmed = role != PartyRole.TUTOR

    def confirm_booking(self, booking_id: str, user: User) -> Booking:
        return self.update_booking_status(booking_id, BookingStatus.CONFIRMED.value, user)

    def cancel_booking(self, booking_id: str, user: User, reason: Optional[str] = None) -> Booking:
        return self.update_booking_status(booking_id, BookingStatus.CANCELLED.value, user, reason)

    def complete_booking(self, booking_id: str, user: User) -> Booking:
        return self.update_booking_status(booking_id, BookingStatus.COMPLETED.value, user)

    # Edits and deletion

    @BaseService.measure_operation("update_booking_details")
    def update_booking_details(
        self, booking_id: str, user: User, update_data: BookingUpdate
    ) -> Booking:
        """
        Edit location, requirements and (parent or admin only) schedule fields.

        Only pending or rescheduled bookings can be edited.
        """
        booking = self._get_or_404(booking_id)
        role = self.resolve_role(booking, user)

        if booking.status not in EDITABLE_STATUSES:
            raise BusinessRuleException(
                f"Cannot edit a booking that is {booking.status}",
                code="BOOKING_NOT_EDITABLE",
                details={"status": booking.status},
            )

        changes = update_data.model_dump(exclude_unset=True)
        if role == PartyRole.TUTOR and SCHEDULE_FIELDS.intersection(changes):
            raise ForbiddenException(
                "Only the parent can change the schedule", code="PARENT_ACTION_ONLY"
            )
        self._check_duration(changes.get("duration_minutes"))

        if not changes:
            return booking

        with self.transaction():
            self.repository.apply_changes(booking, **changes)

        self.logger.info(f"Booking {booking.id} updated by {role.value}: {sorted(changes)}")
        return booking

    @BaseService.measure_operation("delete_booking")
    def delete_booking(self, booking_id: str, user: User) -> bool:
        """Hard-delete one booking. Parent owner or admin only."""
        booking = self._get_or_404(booking_id)
        role = self.resolve_role(booking, user)
        if role == PartyRole.TUTOR:
            raise ForbiddenException(
                "Only the parent who made the booking can delete it", code="PARENT_ACTION_ONLY"
            )

        with self.transaction():
            deleted = self.repository.delete(booking.id)

        self.logger.info(f"Booking {booking_id} deleted by {role.value} {user.id}")
        return deleted
