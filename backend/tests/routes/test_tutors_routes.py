# backend/tests/routes/test_tutors_routes.py
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.dbs_check import DBSCheck

TUTORS = "/api/v1/tutors"


@pytest.fixture
def directory(db: Session, tutor_user, other_tutor):
    db.add(
        DBSCheck(
            tutor_id=tutor_user.id,
            certificate_number="001234567890",
            issue_date=date.today() - timedelta(days=100),
            expiry_date=date.today() + timedelta(days=900),
            status="verified",
        )
    )
    db.commit()
    return tutor_user, other_tutor


class TestSearch:
    def test_lists_active_tutors_most_experienced_first(
        self, client: TestClient, directory, auth_headers_parent
    ):
        response = client.get(TUTORS, headers=auth_headers_parent)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [t["full_name"] for t in data["items"]] == ["Tess Tutor", "Sol Second"]
        assert data["items"][0]["dbs_verified"] is True
        assert data["items"][1]["dbs_verified"] is False

    def test_text_and_subject_filters(self, client: TestClient, directory, auth_headers_parent):
        by_text = client.get(TUTORS, params={"q": "patient"}, headers=auth_headers_parent).json()
        assert [t["full_name"] for t in by_text["items"]] == ["Sol Second"]

        by_subject = client.get(TUTORS, params={"subject": "physics"}, headers=auth_headers_parent).json()
        assert [t["full_name"] for t in by_subject["items"]] == ["Tess Tutor"]

    def test_rate_location_and_experience(self, client: TestClient, directory, auth_headers_parent):
        cheap = client.get(TUTORS, params={"max_rate": 30}, headers=auth_headers_parent).json()
        assert [t["location"] for t in cheap["items"]] == ["Leeds"]

        manchester = client.get(TUTORS, params={"location": "manc"}, headers=auth_headers_parent).json()
        assert manchester["total"] == 1

        veterans = client.get(TUTORS, params={"min_experience": 5}, headers=auth_headers_parent).json()
        assert veterans["total"] == 1

    def test_verified_only(self, client: TestClient, directory, auth_headers_parent, tutor_user):
        data = client.get(TUTORS, params={"verified_only": True}, headers=auth_headers_parent).json()
        assert data["total"] == 1
        assert data["items"][0]["user_id"] == tutor_user.id

    def test_inverted_price_range(self, client: TestClient, directory, auth_headers_parent):
        response = client.get(TUTORS, params={"min_rate": 50, "max_rate": 20}, headers=auth_headers_parent)
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_PRICE_RANGE"

    def test_requires_authentication(self, client: TestClient, directory):
        assert client.get(TUTORS).status_code == 401


class TestProfile:
    def test_get_profile(self, client: TestClient, directory, auth_headers_parent, tutor_user):
        response = client.get(f"{TUTORS}/{tutor_user.id}", headers=auth_headers_parent)
        assert response.status_code == 200
        data = response.json()
        assert data["subjects"] == ["Maths", "Physics"]
        assert data["hourly_rate"] == 40.0
        assert data["average_rating"] is None

    def test_unknown_tutor(self, client: TestClient, auth_headers_parent, parent_user):
        response = client.get(f"{TUTORS}/{parent_user.id}", headers=auth_headers_parent)
        assert response.status_code == 404
        assert response.json()["code"] == "TUTOR_NOT_FOUND"

    def test_tutor_updates_own_profile(self, client: TestClient, auth_headers_other_tutor):
        response = client.put(
            f"{TUTORS}/me",
            json={
                "bio": "English and creative writing",
                "subjects": ["English", "Creative Writing"],
                "levels": ["KS3", "GCSE"],
                "location": "York",
                "hourly_rate": 32.5,
                "years_experience": 4,
            },
            headers=auth_headers_other_tutor,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["location"] == "York"
        assert data["hourly_rate"] == 32.5
        assert data["subjects"] == ["English", "Creative Writing"]

    def test_hidden_profile_leaves_directory(
        self, client: TestClient, directory, auth_headers_other_tutor, auth_headers_parent
    ):
        client.put(
            f"{TUTORS}/me",
            json={"subjects": ["English"], "is_active": False},
            headers=auth_headers_other_tutor,
        )
        assert client.get(TUTORS, headers=auth_headers_parent).json()["total"] == 1

    def test_parents_cannot_create_profiles(self, client: TestClient, auth_headers_parent):
        response = client.put(f"{TUTORS}/me", json={"bio": "Not a tutor"}, headers=auth_headers_parent)
        assert response.status_code == 403
