# backend/tests/repositories/test_booking_repository_queries.py
"""Booking repository queries against SQLite."""

from datetime import date, time
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from app.core.enums import BookingStatus
from app.models.booking import Booking
from app.models.child import Child
from app.models.user import User
from app.repositories.booking_repository import BookingRepository

TODAY = date(2025, 3, 10)


def _booking(parent: User, tutor: User, on: date, status: str = "pending", **extra) -> Booking:
    fields = dict(
        parent_id=parent.id,
        tutor_id=tutor.id,
        subject="Maths",
        scheduled_date=on,
        scheduled_time=time(16, 0),
        duration_minutes=60,
        status=status,
    )
    fields.update(extra)
    return Booking(**fields)


@pytest.fixture
def repo(db: Session) -> BookingRepository:
    return BookingRepository(db)


@pytest.fixture
def seeded(db: Session, parent_user, other_parent, tutor_user, other_tutor, child: Child):
    rows = [
        _booking(parent_user, tutor_user, date(2025, 3, 1), "completed", child_id=child.id,
                 session_fee=Decimal("40.00")),
        _booking(parent_user, tutor_user, date(2025, 3, 12), "confirmed", child_id=child.id),
        _booking(parent_user, other_tutor, date(2025, 3, 20), "pending", subject="English"),
        _booking(parent_user, tutor_user, date(2025, 2, 1), "cancelled", child_id=child.id),
        _booking(other_parent, tutor_user, date(2025, 3, 15), "pending"),
        _booking(parent_user, tutor_user, date(2025, 2, 20), "completed", duration_minutes=90,
                 session_fee=Decimal("60.00")),
    ]
    db.add_all(rows)
    db.commit()
    return rows


def test_lists_only_bookings_of_the_party(repo, seeded, parent_user, other_parent):
    items, total = repo.list_for_user(parent_user.id, today=TODAY)
    assert total == 5
    assert all(b.parent_id == parent_user.id for b in items)

    items, total = repo.list_for_user(other_parent.id, today=TODAY)
    assert total == 1


def test_tutor_sees_bookings_from_every_parent(repo, seeded, tutor_user):
    _, total = repo.list_for_user(tutor_user.id, today=TODAY)
    assert total == 5


def test_admin_scope_sees_everything(repo, seeded):
    _, total = repo.list_for_user(None, today=TODAY)
    assert total == 6


def test_upcoming_and_past_split(repo, seeded, parent_user):
    upcoming, _ = repo.list_for_user(parent_user.id, today=TODAY, when="upcoming")
    assert [b.scheduled_date for b in upcoming] == [date(2025, 3, 12), date(2025, 3, 20)]

    past, _ = repo.list_for_user(parent_user.id, today=TODAY, when="past")
    assert [b.scheduled_date for b in past] == [date(2025, 3, 1), date(2025, 2, 20), date(2025, 2, 1)]


def test_filters_combine(repo, seeded, parent_user, tutor_user, child):
    items, total = repo.list_for_user(
        parent_user.id, today=TODAY, status="completed", child_id=child.id
    )
    assert total == 1
    assert items[0].scheduled_date == date(2025, 3, 1)

    _, total = repo.list_for_user(parent_user.id, today=TODAY, subject="english")
    assert total == 1

    _, total = repo.list_for_user(parent_user.id, today=TODAY, tutor_id=tutor_user.id)
    assert total == 4

    _, total = repo.list_for_user(
        parent_user.id, today=TODAY, date_from=date(2025, 3, 1), date_to=date(2025, 3, 12)
    )
    assert total == 2


def test_pagination(repo, seeded, parent_user):
    page_one, total = repo.list_for_user(parent_user.id, today=TODAY, page=1, per_page=2)
    page_three, _ = repo.list_for_user(parent_user.id, today=TODAY, page=3, per_page=2)
    assert total == 5
    assert len(page_one) == 2
    assert len(page_three) == 1


def test_status_counts_include_every_status(repo, seeded, parent_user):
    counts = repo.count_by_status(parent_user.id)
    assert set(counts) == {s.value for s in BookingStatus}
    assert counts["completed"] == 2
    assert counts["no_show"] == 0


def test_upcoming_count_skips_cancelled_and_past(repo, seeded, parent_user):
    assert repo.count_upcoming(parent_user.id, TODAY) == 2


def test_completed_totals(repo, seeded, parent_user):
    minutes, fees = repo.completed_totals(parent_user.id)
    assert minutes == 150
    assert fees == Decimal("100.00")


def test_has_booking_between(repo, seeded, parent_user, tutor_user, other_tutor, child, db):
    assert repo.has_booking_between(tutor_user.id, child.id)
    assert not repo.has_booking_between(other_tutor.id, child.id)

    only_cancelled = _booking(
        parent_user, other_tutor, date(2025, 1, 5), "cancelled", child_id=child.id
    )
    db.add(only_cancelled)
    db.commit()
    assert not repo.has_booking_between(other_tutor.id, child.id)
    assert repo.has_booking_between(other_tutor.id, child.id, exclude_cancelled=False)


def test_delete_removes_only_the_booking(repo, seeded, db, child, tutor_user):
    target = seeded[1]
    assert repo.delete(target.id) is True
    db.commit()

    assert db.get(Booking, target.id) is None
    assert db.query(Booking).count() == 5
    assert db.get(Child, child.id) is not None
    assert db.get(User, tutor_user.id) is not None
