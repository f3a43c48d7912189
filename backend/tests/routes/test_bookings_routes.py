# backend/tests/routes/test_bookings_routes.py
"""
Booking API tests.

Covers the request -> confirm -> complete lifecycle, party isolation,
counterparty notifications and deletion.
"""

from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.booking import Booking
from app.models.child import Child
from app.models.notification import Notification
from app.models.user import User
from app.services.notification_service import NotificationService

BOOKINGS = "/api/v1/bookings"


def _notifications(db: Session, user: User, notification_type: str):
    return (
        db.query(Notification)
        .filter(Notification.user_id == user.id, Notification.notification_type == notification_type)
        .all()
    )


class TestCreateBooking:
    def test_parent_creates_pending_booking(
        self, client: TestClient, db: Session, auth_headers_parent, tutor_user, child
    ):
        response = client.post(
            BOOKINGS,
            json={
                "tutor_id": tutor_user.id,
                "child_id": child.id,
                "subject": "Maths",
                "scheduled_date": "2025-03-01",
                "scheduled_time": "16:00",
                "duration_minutes": 60,
                "session_fee": 40,
            },
            headers=auth_headers_parent,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["parent_confirmed"] is True
        assert data["tutor_confirmed"] is False
        assert data["child_id"] == child.id
        assert data["scheduled_date"] == "2025-03-01"
        assert data["booking_reference"].startswith("BK-")

        requests = _notifications(db, tutor_user, "booking_request")
        assert len(requests) == 1
        assert requests[0].related_entity_id == data["id"]

    def test_client_supplied_status_is_ignored(
        self, client: TestClient, auth_headers_parent, tutor_user
    ):
        response = client.post(
            BOOKINGS,
            json={
                "tutor_id": tutor_user.id,
                "subject": "Physics",
                "scheduled_date": "2025-03-02",
                "scheduled_time": "10:30",
                "status": "confirmed",
            },
            headers=auth_headers_parent,
        )
        assert response.status_code == 201
        assert response.json()["status"] == "pending"

    def test_tutor_cannot_create(self, client: TestClient, auth_headers_tutor, tutor_user):
        response = client.post(
            BOOKINGS,
            json={
                "tutor_id": tutor_user.id,
                "subject": "Maths",
                "scheduled_date": "2025-03-01",
                "scheduled_time": "16:00",
            },
            headers=auth_headers_tutor,
        )
        assert response.status_code == 403
        assert response.json()["code"] == "PARENT_ONLY"

    def test_cannot_book_another_parents_child(
        self, client: TestClient, auth_headers_other_parent, tutor_user, child
    ):
        response = client.post(
            BOOKINGS,
            json={
                "tutor_id": tutor_user.id,
                "child_id": child.id,
                "subject": "Maths",
                "scheduled_date": "2025-03-01",
                "scheduled_time": "16:00",
            },
            headers=auth_headers_other_parent,
        )
        assert response.status_code == 404
        assert response.json()["code"] == "CHILD_NOT_FOUND"

    def test_invalid_payload_is_problem_json(self, client: TestClient, auth_headers_parent):
        response = client.post(
            BOOKINGS,
            json={"subject": "Maths", "scheduled_date": "01/03/2025", "scheduled_time": "16:00"},
            headers=auth_headers_parent,
        )
        assert response.status_code == 422
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["code"] == "validation_error"

    def test_requires_authentication(self, client: TestClient, db):
        response = client.get(BOOKINGS)
        assert response.status_code == 401


class TestStatusWorkflow:
    def test_tutor_confirms(self, client: TestClient, db: Session, auth_headers_tutor, booking, parent_user):
        response = client.post(f"{BOOKINGS}/{booking.id}/confirm", headers=auth_headers_tutor)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "confirmed"
        assert data["tutor_confirmed"] is True
        assert data["confirmed_at"] is not None

        confirmations = _notifications(db, parent_user, "booking_confirmed")
        assert len(confirmations) == 1
        assert confirmations[0].title == "Booking Confirmed"

    def test_reapplying_same_status_is_idempotent(
        self, client: TestClient, db: Session, auth_headers_tutor, booking, parent_user
    ):
        first = client.post(
            f"{BOOKINGS}/{booking.id}/status", json={"status": "confirmed"}, headers=auth_headers_tutor
        )
        second = client.post(
            f"{BOOKINGS}/{booking.id}/status", json={"status": "confirmed"}, headers=auth_headers_tutor
        )

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["status"] == "confirmed"
        assert second.json()["confirmed_at"] == first.json()["confirmed_at"]
        assert len(_notifications(db, parent_user, "booking_confirmed")) == 2

    def test_full_lifecycle_to_completed(
        self, client: TestClient, auth_headers_tutor, booking
    ):
        client.post(f"{BOOKINGS}/{booking.id}/confirm", headers=auth_headers_tutor)
        response = client.post(f"{BOOKINGS}/{booking.id}/complete", headers=auth_headers_tutor)
        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert response.json()["completed_at"] is not None

    def test_parent_cannot_complete(self, client: TestClient, auth_headers_parent, booking):
        response = client.post(f"{BOOKINGS}/{booking.id}/complete", headers=auth_headers_parent)
        assert response.status_code == 403
        assert response.json()["code"] == "TUTOR_ACTION_ONLY"

    def test_invalid_transition(self, client: TestClient, auth_headers_tutor, booking):
        response = client.post(f"{BOOKINGS}/{booking.id}/complete", headers=auth_headers_tutor)
        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "INVALID_STATUS_TRANSITION"
        assert body["errors"]["current_status"] == "pending"

    def test_parent_cancels_with_reason(
        self, client: TestClient, db: Session, auth_headers_parent, booking, tutor_user, parent_user
    ):
        response = client.post(
            f"{BOOKINGS}/{booking.id}/cancel",
            json={"reason": "Sam is unwell"},
            headers=auth_headers_parent,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "cancelled"
        assert data["cancellation_reason"] == "Sam is unwell"
        assert data["cancelled_by_id"] == parent_user.id
        assert len(_notifications(db, tutor_user, "booking_cancelled")) == 1

    def test_cancel_without_body(self, client: TestClient, auth_headers_tutor, booking):
        response = client.post(f"{BOOKINGS}/{booking.id}/cancel", headers=auth_headers_tutor)
        assert response.status_code == 200
        assert response.json()["cancellation_reason"] is None

    def test_unknown_status_value(self, client: TestClient, auth_headers_tutor, booking):
        response = client.post(
            f"{BOOKINGS}/{booking.id}/status", json={"status": "archived"}, headers=auth_headers_tutor
        )
        assert response.status_code == 422

    def test_admin_action_notifies_both_parties(
        self, client: TestClient, db: Session, auth_headers_admin, booking, parent_user, tutor_user
    ):
        response = client.post(
            f"{BOOKINGS}/{booking.id}/status", json={"status": "cancelled"}, headers=auth_headers_admin
        )
        assert response.status_code == 200
        assert len(_notifications(db, parent_user, "booking_cancelled")) == 1
        assert len(_notifications(db, tutor_user, "booking_cancelled")) == 1


class TestAccessAndListing:
    def test_non_party_is_forbidden(self, client: TestClient, auth_headers_other_parent, booking):
        response = client.get(f"{BOOKINGS}/{booking.id}", headers=auth_headers_other_parent)
        assert response.status_code == 403

    def test_unknown_booking(self, client: TestClient, auth_headers_parent, parent_user):
        response = client.get(f"{BOOKINGS}/01HZZZZZZZZZZZZZZZZZZZZZZZ", headers=auth_headers_parent)
        assert response.status_code == 404
        assert response.json()["code"] == "BOOKING_NOT_FOUND"

    def test_list_is_scoped_and_paginated(
        self, client: TestClient, auth_headers_parent, auth_headers_other_parent, booking
    ):
        response = client.get(BOOKINGS, headers=auth_headers_parent)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == booking.id
        assert data["has_next"] is False

        response = client.get(BOOKINGS, headers=auth_headers_other_parent)
        assert response.json()["total"] == 0

    def test_status_filter(self, client: TestClient, auth_headers_parent, booking):
        pending = client.get(BOOKINGS, params={"status": "pending"}, headers=auth_headers_parent)
        confirmed = client.get(BOOKINGS, params={"status": "confirmed"}, headers=auth_headers_parent)
        assert pending.json()["total"] == 1
        assert confirmed.json()["total"] == 0

    def test_stats(self, client: TestClient, auth_headers_tutor, booking):
        response = client.get(f"{BOOKINGS}/stats", headers=auth_headers_tutor)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["by_status"]["pending"] == 1
        assert data["completed_hours"] == 0


class TestEditAndDelete:
    def test_parent_reschedules_time(self, client: TestClient, auth_headers_parent, booking):
        response = client.patch(
            f"{BOOKINGS}/{booking.id}",
            json={"scheduled_time": "17:30", "location": "Online classroom"},
            headers=auth_headers_parent,
        )
        assert response.status_code == 200
        assert response.json()["scheduled_time"] == "17:30:00"
        assert response.json()["location"] == "Online classroom"

    def test_tutor_cannot_move_schedule(self, client: TestClient, auth_headers_tutor, booking):
        response = client.patch(
            f"{BOOKINGS}/{booking.id}", json={"scheduled_date": "2025-03-05"}, headers=auth_headers_tutor
        )
        assert response.status_code == 403

    def test_delete_removes_exactly_one_booking(
        self, client: TestClient, db: Session, auth_headers_parent, booking, child, tutor_user
    ):
        before = db.query(Booking).count()
        response = client.delete(f"{BOOKINGS}/{booking.id}", headers=auth_headers_parent)

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert db.query(Booking).count() == before - 1
        assert db.get(Booking, booking.id) is None
        assert db.get(Child, child.id) is not None
        assert db.get(User, tutor_user.id) is not None

    def test_tutor_cannot_delete(self, client: TestClient, auth_headers_tutor, booking):
        response = client.delete(f"{BOOKINGS}/{booking.id}", headers=auth_headers_tutor)
        assert response.status_code == 403

    def test_null_schedule_fields_are_rejected(
        self, client: TestClient, db: Session, auth_headers_parent, booking
    ):
        for field in ("scheduled_date", "scheduled_time", "duration_minutes", "session_format"):
            response = client.patch(
                f"{BOOKINGS}/{booking.id}", json={field: None}, headers=auth_headers_parent
            )
            assert response.status_code == 422, field
            assert response.json()["code"] == "validation_error"

        db.refresh(booking)
        assert booking.scheduled_date is not None
        assert booking.duration_minutes == 60

    def test_optional_text_fields_can_be_cleared(
        self, client: TestClient, auth_headers_parent, booking
    ):
        client.patch(
            f"{BOOKINGS}/{booking.id}", json={"location": "Library"}, headers=auth_headers_parent
        )
        response = client.patch(
            f"{BOOKINGS}/{booking.id}", json={"location": None}, headers=auth_headers_parent
        )
        assert response.status_code == 200
        assert response.json()["location"] is None


class TestDualConfirmation:
    def test_held_confirmation_asks_counterparty_instead_of_announcing(
        self, client: TestClient, db: Session, auth_headers_parent, auth_headers_tutor,
        booking, parent_user, tutor_user, monkeypatch,
    ):
        monkeypatch.setattr(settings, "booking_require_dual_confirmation", True)
        client.post(
            f"{BOOKINGS}/{booking.id}/status", json={"status": "rescheduled"}, headers=auth_headers_parent
        )

        response = client.post(f"{BOOKINGS}/{booking.id}/confirm", headers=auth_headers_parent)

        assert response.status_code == 200
        assert response.json()["status"] == "rescheduled"
        assert response.json()["parent_confirmed"] is True
        assert response.json()["tutor_confirmed"] is False
        assert _notifications(db, tutor_user, "booking_confirmed") == []
        waiting = _notifications(db, tutor_user, "booking_awaiting_confirmation")
        assert len(waiting) == 1
        assert waiting[0].message == (
            "The parent has confirmed the booking for Maths and is waiting for you"
        )

        response = client.post(f"{BOOKINGS}/{booking.id}/confirm", headers=auth_headers_tutor)

        assert response.json()["status"] == "confirmed"
        assert len(_notifications(db, parent_user, "booking_confirmed")) == 1


class TestUnitOfWork:
    def test_failed_notification_rolls_back_status_change(
        self, client: TestClient, db: Session, auth_headers_tutor, booking, monkeypatch
    ):
        def fail(*args, **kwargs):
            raise SQLAlchemyError("notifications table unavailable")

        monkeypatch.setattr(NotificationService, "notify", fail)

        response = client.post(f"{BOOKINGS}/{booking.id}/confirm", headers=auth_headers_tutor)

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "DATABASE_ERROR"
        assert "notifications table unavailable" not in response.text
        db.refresh(booking)
        assert booking.status == "pending"
        assert booking.tutor_confirmed is False
        assert booking.confirmed_at is None
        assert db.query(Notification).count() == 0
