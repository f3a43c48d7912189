# backend/tests/unit/test_booking_service_logic.py
"""
Unit tests for BookingService business logic.

These tests mock the database, repositories and notification service to
exercise the status workflow in isolation.
"""

from datetime import date, time
from unittest.mock import MagicMock, Mock

import pytest
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.enums import BookingStatus, PartyRole, UserType
from app.core.exceptions import (
    BusinessRuleException,
    ForbiddenException,
    InvalidStatusTransitionException,
    NotFoundException,
    ValidationException,
)
from app.models.booking import Booking
from app.models.user import User
from app.schemas.booking import BookingCreate, BookingUpdate
from app.services.booking_service import (
    ALLOWED_TRANSITIONS,
    BookingService,
    can_transition,
)


def _user(user_id: str, user_type: UserType) -> Mock:
    user = Mock(spec=User)
    user.id = user_id
    user.user_type = user_type.value
    user.is_active = True
    return user


class TestTransitionTable:
    def test_same_status_is_always_allowed(self):
        for status in BookingStatus:
            assert can_transition(status, status)

    def test_terminal_statuses_have_no_exits(self):
        for terminal in (BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW):
            assert ALLOWED_TRANSITIONS[terminal] == frozenset()
            assert not can_transition(terminal, BookingStatus.PENDING)

    def test_pending_cannot_complete_directly(self):
        assert not can_transition(BookingStatus.PENDING, BookingStatus.COMPLETED)
        assert can_transition(BookingStatus.PENDING, BookingStatus.CONFIRMED)
        assert can_transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED)


class TestBookingServiceUnit:
    """Unit tests for BookingService with mocked dependencies."""

    @pytest.fixture
    def mock_db(self):
        db = Mock(spec=Session)
        db.add = Mock()
        db.flush = Mock()
        db.commit = Mock()
        db.rollback = Mock()
        return db

    @pytest.fixture
    def mock_notification_service(self):
        return Mock()

    @pytest.fixture
    def mock_repository(self):
        return Mock()

    @pytest.fixture
    def booking_service(self, mock_db, mock_notification_service, mock_repository):
        service = BookingService(mock_db, mock_notification_service, mock_repository)
        service.user_repository = Mock()
        service.child_repository = Mock()
        # Mock the transaction context manager
        service.transaction = MagicMock()
        service.transaction.return_value.__enter__ = Mock()
        service.transaction.return_value.__exit__ = Mock(return_value=None)
        return service

    @pytest.fixture
    def parent(self):
        return _user("parent-1", UserType.PARENT)

    @pytest.fixture
    def tutor(self):
        return _user("tutor-1", UserType.TEACHER)

    @pytest.fixture
    def admin(self):
        return _user("admin-1", UserType.ADMIN)

    @pytest.fixture
    def pending_booking(self, mock_repository):
        booking = Booking(
            id="booking-1",
            parent_id="parent-1",
            tutor_id="tutor-1",
            subject="Maths",
            scheduled_date=date(2025, 3, 1),
            scheduled_time=time(16, 0),
            duration_minutes=60,
        )
        mock_repository.get_by_id.return_value = booking
        return booking

    # Creation

    def test_create_booking_starts_pending_with_parent_confirmation(
        self, booking_service, mock_repository, mock_notification_service, parent, tutor
    ):
        booking_service.user_repository.get_by_id.return_value = tutor
        created = Mock(spec=Booking)
        mock_repository.create.return_value = created

        data = BookingCreate(
            tutor_id="tutor-1",
            subject="Maths",
            scheduled_date="2025-03-01",
            scheduled_time="16:00",
            duration_minutes=60,
            status="completed",
        )
        result = booking_service.create_booking(parent, data)

        assert result is created
        kwargs = mock_repository.create.call_args.kwargs
        assert kwargs["status"] == BookingStatus.PENDING.value
        assert kwargs["parent_confirmed"] is True
        assert kwargs["tutor_confirmed"] is False
        assert kwargs["parent_id"] == "parent-1"
        mock_notification_service.notify_booking_request.assert_called_once_with(created)

    def test_create_booking_rejects_non_parent(self, booking_service, tutor):
        data = BookingCreate(
            tutor_id="tutor-1",
            subject="Maths",
            scheduled_date="2025-03-01",
            scheduled_time="16:00",
        )
        with pytest.raises(ForbiddenException):
            booking_service.create_booking(tutor, data)

    def test_create_booking_unknown_tutor(self, booking_service, parent):
        booking_service.user_repository.get_by_id.return_value = None
        data = BookingCreate(
            tutor_id="missing",
            subject="Maths",
            scheduled_date="2025-03-01",
            scheduled_time="16:00",
        )
        with pytest.raises(NotFoundException) as exc_info:
            booking_service.create_booking(parent, data)
        assert exc_info.value.code == "TUTOR_NOT_FOUND"

    def test_create_booking_child_must_belong_to_parent(self, booking_service, parent, tutor):
        booking_service.user_repository.get_by_id.return_value = tutor
        booking_service.child_repository.get_for_parent.return_value = None
        data = BookingCreate(
            tutor_id="tutor-1",
            child_id="someone-elses-child",
            subject="Maths",
            scheduled_date="2025-03-01",
            scheduled_time="16:00",
        )
        with pytest.raises(NotFoundException) as exc_info:
            booking_service.create_booking(parent, data)
        assert exc_info.value.code == "CHILD_NOT_FOUND"

    def test_create_booking_enforces_max_duration(self, booking_service, parent, tutor):
        booking_service.user_repository.get_by_id.return_value = tutor
        data = BookingCreate(
            tutor_id="tutor-1",
            subject="Maths",
            scheduled_date="2025-03-01",
            scheduled_time="16:00",
            duration_minutes=settings.booking_max_duration_minutes + 1,
        )
        with pytest.raises(ValidationException):
            booking_service.create_booking(parent, data)

    # Roles

    def test_resolve_role(self, pending_booking, parent, tutor, admin):
        assert BookingService.resolve_role(pending_booking, parent) == PartyRole.PARENT
        assert BookingService.resolve_role(pending_booking, tutor) == PartyRole.TUTOR
        assert BookingService.resolve_role(pending_booking, admin) == PartyRole.ADMIN

    def test_non_party_is_forbidden(self, booking_service, pending_booking):
        stranger = _user("stranger", UserType.PARENT)
        with pytest.raises(ForbiddenException):
            booking_service.get_booking("booking-1", stranger)

    def test_missing_booking(self, booking_service, mock_repository, parent):
        mock_repository.get_by_id.return_value = None
        with pytest.raises(NotFoundException):
            booking_service.confirm_booking("nope", parent)

    # Status workflow

    def test_tutor_confirmation_confirms_booking(
        self, booking_service, pending_booking, mock_notification_service, tutor
    ):
        result = booking_service.confirm_booking("booking-1", tutor)

        assert result.status == BookingStatus.CONFIRMED.value
        assert result.tutor_confirmed is True
        assert result.parent_confirmed is True
        assert result.confirmed_at is not None
        mock_notification_service.notify_booking_status.assert_called_once_with(
            pending_booking, "confirmed", PartyRole.TUTOR
        )

    def test_dual_confirmation_waits_for_both_parties(
        self, booking_service, pending_booking, mock_notification_service, parent, tutor, monkeypatch
    ):
        monkeypatch.setattr(settings, "booking_require_dual_confirmation", True)
        pending_booking.parent_confirmed = False

        booking_service.confirm_booking("booking-1", tutor)
        assert pending_booking.status == BookingStatus.PENDING.value
        assert pending_booking.tutor_confirmed is True
        mock_notification_service.notify_awaiting_confirmation.assert_called_once_with(
            pending_booking, PartyRole.TUTOR
        )
        mock_notification_service.notify_booking_status.assert_not_called()

        booking_service.confirm_booking("booking-1", parent)
        assert pending_booking.status == BookingStatus.CONFIRMED.value
        mock_notification_service.notify_booking_status.assert_called_once_with(
            pending_booking, "confirmed", PartyRole.PARENT
        )

    def test_same_status_reapplication_is_idempotent(
        self, booking_service, pending_booking, mock_notification_service, tutor
    ):
        booking_service.confirm_booking("booking-1", tutor)
        first_confirmed_at = pending_booking.confirmed_at

        booking_service.confirm_booking("booking-1", tutor)

        assert pending_booking.status == BookingStatus.CONFIRMED.value
        assert pending_booking.confirmed_at == first_confirmed_at
        assert mock_notification_service.notify_booking_status.call_count == 2

    def test_parent_cancel_records_reason_and_notifies_tutor(
        self, booking_service, pending_booking, mock_notification_service, parent
    ):
        booking_service.cancel_booking("booking-1", parent, "Family holiday")

        assert pending_booking.status == BookingStatus.CANCELLED.value
        assert pending_booking.cancelled_by_id == "parent-1"
        assert pending_booking.cancellation_reason == "Family holiday"
        assert pending_booking.cancelled_at is not None
        mock_notification_service.notify_booking_status.assert_called_once_with(
            pending_booking, "cancelled", PartyRole.PARENT
        )

    def test_parent_cannot_complete(self, booking_service, pending_booking, parent):
        pending_booking.status = BookingStatus.CONFIRMED.value
        with pytest.raises(ForbiddenException) as exc_info:
            booking_service.complete_booking("booking-1", parent)
        assert exc_info.value.code == "TUTOR_ACTION_ONLY"

    def test_tutor_completes_confirmed_booking(self, booking_service, pending_booking, tutor):
        pending_booking.status = BookingStatus.CONFIRMED.value
        booking_service.complete_booking("booking-1", tutor)
        assert pending_booking.status == BookingStatus.COMPLETED.value
        assert pending_booking.completed_at is not None

    def test_disallowed_transition_is_rejected(
        self, booking_service, pending_booking, mock_notification_service, tutor
    ):
        with pytest.raises(InvalidStatusTransitionException):
            booking_service.complete_booking("booking-1", tutor)
        assert pending_booking.status == BookingStatus.PENDING.value
        mock_notification_service.notify_booking_status.assert_not_called()

    def test_transition_table_can_be_disabled(
        self, booking_service, pending_booking, tutor, monkeypatch
    ):
        monkeypatch.setattr(settings, "booking_enforce_transitions", False)
        booking_service.complete_booking("booking-1", tutor)
        assert pending_booking.status == BookingStatus.COMPLETED.value

    def test_unknown_status_is_validation_error(self, booking_service, pending_booking, tutor):
        with pytest.raises(ValidationException) as exc_info:
            booking_service.update_booking_status("booking-1", "archived", tutor)
        assert exc_info.value.code == "INVALID_STATUS"

    def test_reschedule_by_parent_resets_tutor_confirmation(
        self, booking_service, pending_booking, parent
    ):
        pending_booking.status = BookingStatus.CONFIRMED.value
        pending_booking.tutor_confirmed = True

        booking_service.update_booking_status("booking-1", "rescheduled", parent)

        assert pending_booking.status == BookingStatus.RESCHEDULED.value
        assert pending_booking.parent_confirmed is True
        assert pending_booking.tutor_confirmed is False

    def test_admin_action_notifies_with_admin_role(
        self, booking_service, pending_booking, mock_notification_service, admin
    ):
        booking_service.cancel_booking("booking-1", admin)
        mock_notification_service.notify_booking_status.assert_called_once_with(
            pending_booking, "cancelled", PartyRole.ADMIN
        )

    # Edits and deletion

    def test_tutor_cannot_change_schedule(self, booking_service, pending_booking, tutor):
        with pytest.raises(ForbiddenException):
            booking_service.update_booking_details(
                "booking-1", tutor, BookingUpdate(scheduled_time="17:00")
            )

    def test_tutor_can_update_location(
        self, booking_service, pending_booking, mock_repository, tutor
    ):
        booking_service.update_booking_details(
            "booking-1", tutor, BookingUpdate(location="Community library")
        )
        mock_repository.apply_changes.assert_called_once_with(
            pending_booking, location="Community library"
        )

    def test_completed_booking_is_not_editable(self, booking_service, pending_booking, parent):
        pending_booking.status = BookingStatus.COMPLETED.value
        with pytest.raises(BusinessRuleException) as exc_info:
            booking_service.update_booking_details(
                "booking-1", parent, BookingUpdate(location="Home")
            )
        assert exc_info.value.code == "BOOKING_NOT_EDITABLE"

    def test_tutor_cannot_delete(self, booking_service, pending_booking, mock_repository, tutor):
        with pytest.raises(ForbiddenException):
            booking_service.delete_booking("booking-1", tutor)
        mock_repository.delete.assert_not_called()

    def test_parent_deletes_booking(self, booking_service, pending_booking, mock_repository, parent):
        mock_repository.delete.return_value = True
        assert booking_service.delete_booking("booking-1", parent) is True
        mock_repository.delete.assert_called_once_with("booking-1")
