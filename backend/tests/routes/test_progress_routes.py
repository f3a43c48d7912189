# backend/tests/routes/test_progress_routes.py
"""Progress reports: tutor writes, parent reads, per-child statistics."""

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.progress_report import ProgressReport

PROGRESS = "/api/v1/progress"


def _report_payload(child_id: str, **overrides) -> dict:
    payload = {
        "child_id": child_id,
        "subject": "Maths",
        "session_date": "2025-03-01",
        "progress_notes": "Long division is now solid",
        "skills_improved": ["division"],
        "areas_for_improvement": ["fractions"],
        "homework_completion": 80,
        "overall_rating": 4,
        "progress_percentage": 60,
    }
    payload.update(overrides)
    return payload


class TestCreateReport:
    def test_tutor_with_booking_creates_report(
        self, client: TestClient, auth_headers_tutor, tutor_user, child, booking
    ):
        response = client.post(
            PROGRESS,
            json=_report_payload(child.id, booking_id=booking.id),
            headers=auth_headers_tutor,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["tutor_id"] == tutor_user.id
        assert data["booking_id"] == booking.id
        assert data["skills_improved"] == ["division"]

    def test_tutor_without_booking_is_forbidden(
        self, client: TestClient, auth_headers_other_tutor, child, booking
    ):
        response = client.post(PROGRESS, json=_report_payload(child.id), headers=auth_headers_other_tutor)
        assert response.status_code == 403
        assert response.json()["code"] == "NO_BOOKING_WITH_CHILD"

    def test_cancelled_booking_does_not_count(
        self, client: TestClient, db: Session, auth_headers_tutor, child, booking
    ):
        booking.status = "cancelled"
        db.commit()
        response = client.post(PROGRESS, json=_report_payload(child.id), headers=auth_headers_tutor)
        assert response.status_code == 403

    def test_parents_cannot_write_reports(self, client: TestClient, auth_headers_parent, child):
        response = client.post(PROGRESS, json=_report_payload(child.id), headers=auth_headers_parent)
        assert response.status_code == 403

    def test_rating_out_of_range(self, client: TestClient, auth_headers_tutor, child, booking):
        response = client.post(
            PROGRESS, json=_report_payload(child.id, overall_rating=6), headers=auth_headers_tutor
        )
        assert response.status_code == 422


@pytest.fixture
def history(db: Session, child, tutor_user, booking):
    # Oldest first: two weak sessions, then three strong ones
    ratings = [(date(2025, 1, 6), 2), (date(2025, 1, 13), 2), (date(2025, 1, 20), 4),
               (date(2025, 1, 27), 4), (date(2025, 2, 3), 5)]
    rows = [
        ProgressReport(
            child_id=child.id,
            tutor_id=tutor_user.id,
            subject="Maths",
            session_date=session_date,
            overall_rating=rating,
            homework_completion=90,
        )
        for session_date, rating in ratings
    ]
    rows.append(
        ProgressReport(
            child_id=child.id,
            tutor_id=tutor_user.id,
            subject="Physics",
            session_date=date(2025, 2, 4),
            progress_percentage=30,
        )
    )
    db.add_all(rows)
    db.commit()
    return rows


class TestReadReports:
    def test_parent_lists_reports_for_their_child(self, client: TestClient, history, auth_headers_parent, child):
        response = client.get(PROGRESS, params={"child_id": child.id}, headers=auth_headers_parent)
        assert response.status_code == 200
        assert response.json()["total"] == 6

    def test_other_parent_sees_nothing(self, client: TestClient, history, auth_headers_other_parent):
        response = client.get(PROGRESS, headers=auth_headers_other_parent)
        assert response.json()["total"] == 0

    def test_stats_for_all_time(self, client: TestClient, history, auth_headers_parent, child):
        response = client.get(f"{PROGRESS}/children/{child.id}/stats", headers=auth_headers_parent)

        assert response.status_code == 200
        stats = response.json()
        assert stats["time_range"] == "all"
        assert stats["total_reports"] == 6
        assert stats["average_rating"] == pytest.approx(3.4)
        assert stats["average_homework_completion"] == pytest.approx(90.0)
        assert stats["average_attendance"] == pytest.approx(100.0)
        assert stats["average_progress"] == pytest.approx(30.0)
        assert set(stats["by_subject"]) == {"Maths", "Physics"}
        assert stats["by_subject"]["Maths"]["report_count"] == 5

    def test_stats_subject_filter_and_trend(self, client: TestClient, history, auth_headers_parent, child):
        response = client.get(
            f"{PROGRESS}/children/{child.id}/stats",
            params={"subject": "maths"},
            headers=auth_headers_parent,
        )
        stats = response.json()
        assert stats["total_reports"] == 5
        assert stats["trend"] == "improving"

    def test_stats_invalid_time_range(self, client: TestClient, auth_headers_parent, child):
        response = client.get(
            f"{PROGRESS}/children/{child.id}/stats",
            params={"time_range": "2weeks"},
            headers=auth_headers_parent,
        )
        assert response.status_code == 422

    def test_stats_hidden_from_other_parent(self, client: TestClient, auth_headers_other_parent, child):
        response = client.get(f"{PROGRESS}/children/{child.id}/stats", headers=auth_headers_other_parent)
        assert response.status_code == 404
