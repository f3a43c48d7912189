# backend/tests/conftest.py
"""
Pytest configuration for the TutorHub backend.

Tests run against an in-memory SQLite database (see backend/conftest.py for
the environment pinned before the app is imported). Every test gets a fresh
schema; the FastAPI app shares the test session through a ``get_db`` override.
"""

from datetime import date, time
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.api.dependencies import get_db, get_storage_client
from app.auth import create_access_token
from app.core.enums import BookingStatus, UserType
from app.database import Base, SessionLocal, engine
from app.main import app
from app.models.booking import Booking
from app.models.child import Child
from app.models.tutor_profile import TutorProfile
from app.models.user import User
from app.services.storage_memory_client import MemoryStorageClient


@pytest.fixture(scope="function")
def db():
    """
    Create a new database session for each test.

    Tables are created before the test and dropped afterwards so no state
    leaks between tests.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage() -> MemoryStorageClient:
    return MemoryStorageClient()


@pytest.fixture
def client(db: Session, storage: MemoryStorageClient):
    """Create a test client bound to the test database and in-memory storage."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_client] = lambda: storage

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


def _make_user(db: Session, email: str, full_name: str, user_type: UserType) -> User:
    user = User(email=email, full_name=full_name, user_type=user_type.value, is_active=True)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def parent_user(db: Session) -> User:
    return _make_user(db, "parent@example.com", "Pat Parent", UserType.PARENT)


@pytest.fixture
def other_parent(db: Session) -> User:
    return _make_user(db, "other.parent@example.com", "Olive Other", UserType.PARENT)


@pytest.fixture
def tutor_user(db: Session) -> User:
    """Teacher with an active directory profile."""
    tutor = _make_user(db, "tutor@example.com", "Tess Tutor", UserType.TEACHER)
    db.add(
        TutorProfile(
            user_id=tutor.id,
            bio="Maths and physics tutor, GCSE to A-level",
            subjects=["Maths", "Physics"],
            levels=["GCSE", "A-level"],
            location="Manchester",
            hourly_rate=Decimal("40.00"),
            years_experience=8,
        )
    )
    db.commit()
    return tutor


@pytest.fixture
def other_tutor(db: Session) -> User:
    tutor = _make_user(db, "second.tutor@example.com", "Sol Second", UserType.TEACHER)
    db.add(
        TutorProfile(
            user_id=tutor.id,
            bio="Patient English tutor",
            subjects=["English"],
            levels=["KS2", "KS3"],
            location="Leeds",
            hourly_rate=Decimal("25.00"),
            years_experience=3,
        )
    )
    db.commit()
    return tutor


@pytest.fixture
def admin_user(db: Session) -> User:
    return _make_user(db, "admin@example.com", "Ada Admin", UserType.ADMIN)


@pytest.fixture
def school_user(db: Session) -> User:
    return _make_user(db, "school@example.com", "Springfield School", UserType.SCHOOL)


@pytest.fixture
def child(db: Session, parent_user: User) -> Child:
    sam = Child(
        parent_id=parent_user.id,
        name="Sam",
        age=10,
        school_year="Year 6",
        subjects_of_interest=["Maths"],
        academic_levels={"Maths": {"current_level": "Year 5", "target_level": "Year 6"}},
    )
    db.add(sam)
    db.commit()
    return sam


@pytest.fixture
def booking(db: Session, parent_user: User, tutor_user: User, child: Child) -> Booking:
    """Pending booking with only the parent's confirmation recorded."""
    pending = Booking(
        parent_id=parent_user.id,
        tutor_id=tutor_user.id,
        child_id=child.id,
        subject="Maths",
        scheduled_date=date(2025, 3, 1),
        scheduled_time=time(16, 0),
        duration_minutes=60,
        session_fee=Decimal("40.00"),
        status=BookingStatus.PENDING.value,
    )
    db.add(pending)
    db.commit()
    return pending


def _auth_headers(user: User) -> dict:
    token = create_access_token(data={"sub": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers_parent(parent_user: User) -> dict:
    return _auth_headers(parent_user)


@pytest.fixture
def auth_headers_other_parent(other_parent: User) -> dict:
    return _auth_headers(other_parent)


@pytest.fixture
def auth_headers_tutor(tutor_user: User) -> dict:
    return _auth_headers(tutor_user)


@pytest.fixture
def auth_headers_other_tutor(other_tutor: User) -> dict:
    return _auth_headers(other_tutor)


@pytest.fixture
def auth_headers_admin(admin_user: User) -> dict:
    return _auth_headers(admin_user)


@pytest.fixture
def auth_headers_school(school_user: User) -> dict:
    return _auth_headers(school_user)
