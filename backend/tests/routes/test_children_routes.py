# backend/tests/routes/test_children_routes.py
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.booking import Booking
from app.models.child import Child

CHILDREN = "/api/v1/children"


class TestChildCrud:
    def test_create_and_list(self, client: TestClient, auth_headers_parent, parent_user):
        response = client.post(
            CHILDREN,
            json={
                "name": "Robin",
                "age": 14,
                "school_year": "Year 9",
                "subjects_of_interest": ["Chemistry", "Maths"],
                "academic_levels": {"Chemistry": {"current_level": "KS3", "target_level": "GCSE"}},
            },
            headers=auth_headers_parent,
        )
        assert response.status_code == 201
        created = response.json()
        assert created["parent_id"] == parent_user.id
        assert created["academic_levels"]["Chemistry"]["target_level"] == "GCSE"

        listing = client.get(CHILDREN, headers=auth_headers_parent)
        assert listing.status_code == 200
        assert [c["name"] for c in listing.json()] == ["Robin"]

    def test_name_is_required(self, client: TestClient, auth_headers_parent):
        response = client.post(CHILDREN, json={"age": 9}, headers=auth_headers_parent)
        assert response.status_code == 422

    def test_update(self, client: TestClient, auth_headers_parent, child):
        response = client.patch(
            f"{CHILDREN}/{child.id}",
            json={"school_year": "Year 7", "learning_style": "visual"},
            headers=auth_headers_parent,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["school_year"] == "Year 7"
        assert data["learning_style"] == "visual"
        assert data["name"] == "Sam"

    def test_null_for_required_fields_is_rejected(
        self, client: TestClient, db: Session, auth_headers_parent, child
    ):
        for field in ("name", "subjects_of_interest", "academic_levels"):
            response = client.patch(
                f"{CHILDREN}/{child.id}", json={field: None}, headers=auth_headers_parent
            )
            assert response.status_code == 422, field
            assert response.json()["code"] == "validation_error"

        db.refresh(child)
        assert child.name == "Sam"

    def test_optional_fields_can_be_cleared(self, client: TestClient, auth_headers_parent, child):
        response = client.patch(
            f"{CHILDREN}/{child.id}", json={"age": None, "school_year": None}, headers=auth_headers_parent
        )
        assert response.status_code == 200
        assert response.json()["age"] is None
        assert response.json()["school_year"] is None

    def test_delete_keeps_bookings(
        self, client: TestClient, db: Session, auth_headers_parent, child, booking
    ):
        response = client.delete(f"{CHILDREN}/{child.id}", headers=auth_headers_parent)

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert db.get(Child, child.id) is None
        remaining = db.get(Booking, booking.id)
        assert remaining is not None
        assert remaining.child_id is None


class TestChildAccess:
    def test_other_parent_gets_not_found(self, client: TestClient, auth_headers_other_parent, child):
        for response in (
            client.get(f"{CHILDREN}/{child.id}", headers=auth_headers_other_parent),
            client.patch(f"{CHILDREN}/{child.id}", json={"age": 11}, headers=auth_headers_other_parent),
            client.delete(f"{CHILDREN}/{child.id}", headers=auth_headers_other_parent),
        ):
            assert response.status_code == 404
            assert response.json()["code"] == "CHILD_NOT_FOUND"

    def test_other_parent_list_is_empty(self, client: TestClient, auth_headers_other_parent, child):
        assert client.get(CHILDREN, headers=auth_headers_other_parent).json() == []

    def test_tutor_with_booking_can_read(self, client: TestClient, auth_headers_tutor, child, booking):
        response = client.get(f"{CHILDREN}/{child.id}", headers=auth_headers_tutor)
        assert response.status_code == 200
        assert response.json()["name"] == "Sam"

    def test_tutor_without_booking_cannot_read(self, client: TestClient, auth_headers_other_tutor, child):
        response = client.get(f"{CHILDREN}/{child.id}", headers=auth_headers_other_tutor)
        assert response.status_code == 404

    def test_admin_can_read(self, client: TestClient, auth_headers_admin, child):
        assert client.get(f"{CHILDREN}/{child.id}", headers=auth_headers_admin).status_code == 200

    def test_tutor_cannot_create(self, client: TestClient, auth_headers_tutor):
        response = client.post(CHILDREN, json={"name": "Nope"}, headers=auth_headers_tutor)
        assert response.status_code == 403
        assert response.json()["code"] == "PARENT_ONLY"
