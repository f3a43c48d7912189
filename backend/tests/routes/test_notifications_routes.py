# backend/tests/routes/test_notifications_routes.py
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.notification import Notification

NOTIFICATIONS = "/api/v1/notifications"


@pytest.fixture
def inbox(db: Session, parent_user, tutor_user):
    base = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
    rows = [
        Notification(
            user_id=parent_user.id,
            notification_type="booking_confirmed",
            title=f"Booking Confirmed {i}",
            message="Your booking for Maths has been confirmed by the tutor",
            action_url="/bookings",
            created_at=base + timedelta(hours=i),
        )
        for i in range(3)
    ]
    rows.append(
        Notification(
            user_id=tutor_user.id,
            notification_type="booking_request",
            title="New Booking Request",
            message="Pat Parent has requested a Maths session",
            created_at=base,
        )
    )
    db.add_all(rows)
    db.commit()
    return rows


def test_list_newest_first(client: TestClient, inbox, auth_headers_parent):
    response = client.get(NOTIFICATIONS, params={"per_page": 2}, headers=auth_headers_parent)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert data["has_next"] is True
    assert [n["title"] for n in data["items"]] == ["Booking Confirmed 2", "Booking Confirmed 1"]


def test_unread_count_and_mark_read(client: TestClient, inbox, auth_headers_parent):
    assert client.get(f"{NOTIFICATIONS}/unread-count", headers=auth_headers_parent).json() == {
        "unread_count": 3
    }

    response = client.post(f"{NOTIFICATIONS}/{inbox[0].id}/read", headers=auth_headers_parent)
    assert response.status_code == 200
    assert response.json()["is_read"] is True
    assert response.json()["read_at"] is not None

    assert client.get(f"{NOTIFICATIONS}/unread-count", headers=auth_headers_parent).json()[
        "unread_count"
    ] == 2

    unread = client.get(NOTIFICATIONS, params={"unread_only": True}, headers=auth_headers_parent)
    assert unread.json()["total"] == 2


def test_cannot_read_someone_elses_notification(client: TestClient, inbox, auth_headers_parent):
    response = client.post(f"{NOTIFICATIONS}/{inbox[3].id}/read", headers=auth_headers_parent)
    assert response.status_code == 404
    assert response.json()["code"] == "NOTIFICATION_NOT_FOUND"


def test_read_all_touches_only_the_caller(
    client: TestClient, inbox, auth_headers_parent, auth_headers_tutor
):
    response = client.post(f"{NOTIFICATIONS}/read-all", headers=auth_headers_parent)
    assert response.status_code == 200
    assert response.json() == {"updated": 3}

    assert client.get(f"{NOTIFICATIONS}/unread-count", headers=auth_headers_parent).json()[
        "unread_count"
    ] == 0
    assert client.get(f"{NOTIFICATIONS}/unread-count", headers=auth_headers_tutor).json()[
        "unread_count"
    ] == 1


def test_booking_request_lands_in_tutor_inbox(
    client: TestClient, auth_headers_parent, auth_headers_tutor, tutor_user
):
    client.post(
        "/api/v1/bookings",
        json={
            "tutor_id": tutor_user.id,
            "subject": "Physics",
            "scheduled_date": "2025-04-02",
            "scheduled_time": "15:00",
        },
        headers=auth_headers_parent,
    )
    items = client.get(NOTIFICATIONS, headers=auth_headers_tutor).json()["items"]
    assert len(items) == 1
    assert items[0]["notification_type"] == "booking_request"
    assert items[0]["related_entity_type"] == "booking"
