# backend/tests/routes/test_resources_routes.py
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.resource import Resource

RESOURCES = "/api/v1/resources"


@pytest.fixture
def library(db: Session, tutor_user, other_tutor, school_user):
    base = datetime(2025, 2, 1, 9, 0, tzinfo=timezone.utc)
    rows = [
        Resource(
            created_by=tutor_user.id,
            title="Fractions worksheet",
            description="Adding and simplifying fractions",
            resource_type="worksheet",
            subject="Maths",
            grade_level="Year 6",
            is_public=True,
            created_at=base,
        ),
        Resource(
            created_by=tutor_user.id,
            title="Draft algebra notes",
            resource_type="document",
            subject="Maths",
            grade_level="GCSE",
            is_public=False,
            created_at=base + timedelta(days=1),
        ),
        Resource(
            created_by=other_tutor.id,
            title="Poetry video",
            resource_type="video",
            subject="English",
            external_url="https://example.com/poetry",
            is_public=True,
            created_at=base + timedelta(days=2),
        ),
        Resource(
            created_by=school_user.id,
            title="Staff-only timetable",
            resource_type="document",
            is_public=False,
            created_at=base + timedelta(days=3),
        ),
    ]
    db.add_all(rows)
    db.commit()
    return rows


def _titles(response) -> list:
    return [r["title"] for r in response.json()["items"]]


class TestCreate:
    def test_tutor_creates_private_by_default(self, client: TestClient, auth_headers_tutor, tutor_user):
        response = client.post(
            RESOURCES,
            json={"title": "Times tables", "subject": "Maths", "resource_type": "worksheet"},
            headers=auth_headers_tutor,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["created_by"] == tutor_user.id
        assert data["resource_type"] == "worksheet"
        assert data["is_public"] is False

    def test_school_can_create(self, client: TestClient, auth_headers_school):
        response = client.post(
            RESOURCES, json={"title": "Reading list", "is_public": True}, headers=auth_headers_school
        )
        assert response.status_code == 201
        assert response.json()["resource_type"] == "document"

    def test_parent_cannot_create(self, client: TestClient, auth_headers_parent):
        response = client.post(RESOURCES, json={"title": "Nope"}, headers=auth_headers_parent)
        assert response.status_code == 403
        assert response.json()["code"] == "RESOURCE_CREATOR_ONLY"

    def test_unknown_type_rejected(self, client: TestClient, auth_headers_tutor):
        response = client.post(
            RESOURCES, json={"title": "Podcast", "resource_type": "audio"}, headers=auth_headers_tutor
        )
        assert response.status_code == 422


class TestVisibility:
    def test_parent_sees_public_only_newest_first(self, client: TestClient, library, auth_headers_parent):
        response = client.get(RESOURCES, headers=auth_headers_parent)

        assert response.status_code == 200
        assert response.json()["total"] == 2
        assert _titles(response) == ["Poetry video", "Fractions worksheet"]

    def test_creator_also_sees_own_private(self, client: TestClient, library, auth_headers_tutor):
        response = client.get(RESOURCES, headers=auth_headers_tutor)
        assert _titles(response) == ["Poetry video", "Draft algebra notes", "Fractions worksheet"]

    def test_mine_only(self, client: TestClient, library, auth_headers_tutor):
        response = client.get(RESOURCES, params={"mine": "true"}, headers=auth_headers_tutor)
        assert _titles(response) == ["Draft algebra notes", "Fractions worksheet"]

    def test_admin_sees_everything(self, client: TestClient, library, auth_headers_admin):
        assert client.get(RESOURCES, headers=auth_headers_admin).json()["total"] == 4

    def test_private_resource_hidden_from_others(
        self, client: TestClient, library, auth_headers_parent, auth_headers_admin
    ):
        private = library[1]
        response = client.get(f"{RESOURCES}/{private.id}", headers=auth_headers_parent)
        assert response.status_code == 404
        assert response.json()["code"] == "RESOURCE_NOT_FOUND"

        assert client.get(f"{RESOURCES}/{private.id}", headers=auth_headers_admin).status_code == 200


class TestFilters:
    def test_search_matches_title_description_and_subject(
        self, client: TestClient, library, auth_headers_parent
    ):
        by_description = client.get(
            RESOURCES, params={"q": "SIMPLIFYING"}, headers=auth_headers_parent
        )
        assert _titles(by_description) == ["Fractions worksheet"]

        by_subject = client.get(RESOURCES, params={"q": "english"}, headers=auth_headers_parent)
        assert _titles(by_subject) == ["Poetry video"]

    def test_type_subject_and_grade(self, client: TestClient, library, auth_headers_tutor):
        assert _titles(
            client.get(RESOURCES, params={"resource_type": "video"}, headers=auth_headers_tutor)
        ) == ["Poetry video"]
        assert _titles(
            client.get(
                RESOURCES, params={"subject": "maths", "grade_level": "gcse"}, headers=auth_headers_tutor
            )
        ) == ["Draft algebra notes"]

    def test_invalid_type_filter(self, client: TestClient, auth_headers_parent):
        response = client.get(RESOURCES, params={"resource_type": "audio"}, headers=auth_headers_parent)
        assert response.status_code == 422


class TestEditAndDelete:
    def test_owner_toggles_visibility(
        self, client: TestClient, library, auth_headers_tutor, auth_headers_parent
    ):
        private = library[1]
        response = client.patch(
            f"{RESOURCES}/{private.id}", json={"is_public": True}, headers=auth_headers_tutor
        )

        assert response.status_code == 200
        assert response.json()["is_public"] is True
        assert client.get(f"{RESOURCES}/{private.id}", headers=auth_headers_parent).status_code == 200

    def test_non_owner_cannot_edit_public_resource(
        self, client: TestClient, library, auth_headers_other_tutor
    ):
        response = client.patch(
            f"{RESOURCES}/{library[0].id}", json={"title": "Mine now"}, headers=auth_headers_other_tutor
        )
        assert response.status_code == 403
        assert response.json()["code"] == "NOT_RESOURCE_OWNER"

    def test_null_for_required_fields_is_rejected(
        self, client: TestClient, library, auth_headers_tutor
    ):
        for field in ("title", "resource_type", "is_public"):
            response = client.patch(
                f"{RESOURCES}/{library[0].id}", json={field: None}, headers=auth_headers_tutor
            )
            assert response.status_code == 422, field

    def test_owner_and_admin_can_delete(
        self, client: TestClient, db: Session, library, auth_headers_tutor, auth_headers_admin
    ):
        assert client.delete(f"{RESOURCES}/{library[0].id}", headers=auth_headers_tutor).status_code == 200
        assert client.delete(f"{RESOURCES}/{library[2].id}", headers=auth_headers_admin).status_code == 200
        assert db.get(Resource, library[0].id) is None
        assert db.get(Resource, library[2].id) is None

    def test_other_user_cannot_delete(self, client: TestClient, library, auth_headers_other_tutor):
        response = client.delete(f"{RESOURCES}/{library[0].id}", headers=auth_headers_other_tutor)
        assert response.status_code == 403
