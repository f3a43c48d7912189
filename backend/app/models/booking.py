# backend/app/models/booking.py
"""
Booking model for the TutorHub platform.

A booking is a tutoring session requested by a parent with a tutor, optionally
for one of the parent's children. Bookings store their schedule, format and
fee directly. Parties are referenced, never owned: deleting a booking leaves
the parent, the tutor and the child untouched, and deleting a child only
clears ``child_id`` on its bookings.
"""

from datetime import date, datetime, timezone
import logging
import secrets
import string
from typing import Any, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import BookingStatus, PartyRole, SessionFormat, SessionType
from ..database import Base

logger = logging.getLogger(__name__)

_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


def generate_booking_reference(on: Optional[date] = None) -> str:
    """Human-friendly booking reference, e.g. ``BK-250301-7QK2ZD``."""
    stamp = (on or datetime.now(timezone.utc).date()).strftime("%y%m%d")
    suffix = "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(6))
    return f"BK-{stamp}-{suffix}"


class Booking(Base):
    """
    Tutoring session between a parent (and child) and a tutor.

    New bookings are pending with the parent's confirmation already recorded;
    the tutor confirms (or the parent cancels) from there.
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    booking_reference = Column(
        String(20), nullable=False, unique=True, default=generate_booking_reference
    )

    # Parties
    parent_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    tutor_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    child_id = Column(
        String(26), ForeignKey("children.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Session details
    subject = Column(String(100), nullable=False, index=True)
    session_type = Column(String(20), nullable=False, default=SessionType.REGULAR.value)
    scheduled_date = Column(Date, nullable=False, index=True)
    scheduled_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=60)
    session_format = Column(String(20), nullable=False, default=SessionFormat.ONLINE.value)
    location = Column(Text, nullable=True)
    session_fee = Column(Numeric(10, 2), nullable=True)
    special_requirements = Column(Text, nullable=True)

    # Workflow
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    parent_confirmed = Column(Boolean, nullable=False, default=True)
    tutor_confirmed = Column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    # Cancellation tracking
    cancelled_by_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    parent = relationship("User", foreign_keys=[parent_id], backref="parent_bookings")
    tutor = relationship("User", foreign_keys=[tutor_id], backref="tutor_bookings")
    child = relationship("Child", foreign_keys=[child_id], backref="bookings")
    cancelled_by = relationship("User", foreign_keys=[cancelled_by_id])

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'rescheduled', 'no_show')",
            name="ck_bookings_status",
        ),
        CheckConstraint(
            "session_type IN ('regular', 'trial', 'assessment', 'makeup')",
            name="ck_bookings_session_type",
        ),
        CheckConstraint(
            "session_format IN ('online', 'in-person', 'hybrid')",
            name="ck_bookings_session_format",
        ),
        CheckConstraint("duration_minutes > 0", name="check_duration_positive"),
        CheckConstraint(
            "session_fee IS NULL OR session_fee >= 0", name="check_fee_non_negative"
        ),
    )

    def __init__(self, **kwargs: Any) -> None:
        """Initialize as a pending request confirmed by the parent."""
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.PENDING.value
        if self.parent_confirmed is None:
            self.parent_confirmed = True
        if self.tutor_confirmed is None:
            self.tutor_confirmed = False
        if not self.booking_reference:
            self.booking_reference = generate_booking_reference()

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: parent={self.parent_id}, tutor={self.tutor_id}, "
            f"date={self.scheduled_date} {self.scheduled_time}, status={self.status}>"
        )

    def record_confirmation(self, role: PartyRole) -> None:
        """Set the confirmation flag belonging to ``role``."""
        if role == PartyRole.PARENT:
            self.parent_confirmed = True
        elif role == PartyRole.TUTOR:
            self.tutor_confirmed = True
        else:
            # Admin confirmation stands in for both parties
            self.parent_confirmed = True
            self.tutor_confirmed = True

    @property
    def is_fully_confirmed(self) -> bool:
        return bool(self.parent_confirmed) and bool(self.tutor_confirmed)

    def cancel(self, cancelled_by_user_id: str, reason: Optional[str] = None) -> None:
        """Cancel this booking."""
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_at = datetime.now(timezone.utc)
        self.cancelled_by_id = cancelled_by_user_id
        if reason is not None:
            self.cancellation_reason = reason
        logger.info(f"Booking {self.id} cancelled by user {cancelled_by_user_id}")

    def complete(self) -> None:
        """Mark booking as completed."""
        self.status = BookingStatus.COMPLETED.value
        self.completed_at = datetime.now(timezone.utc)
        logger.info(f"Booking {self.id} marked as completed")

    def role_of(self, user_id: str) -> Optional[PartyRole]:
        """Return the party role ``user_id`` plays on this booking, if any."""
        if user_id == self.tutor_id:
            return PartyRole.TUTOR
        if user_id == self.parent_id:
            return PartyRole.PARENT
        return None


Index("ix_bookings_tutor_date", Booking.tutor_id, Booking.scheduled_date)
Index("ix_bookings_parent_date", Booking.parent_id, Booking.scheduled_date)
