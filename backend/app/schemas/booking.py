# backend/app/schemas/booking.py
"""
Booking schemas for the TutorHub platform.

Bookings are created by parents; the tutor and an optional child are
referenced by id. Status is never taken from the client on creation.
"""

from datetime import date, datetime, time
import re
from typing import Dict, Literal, Optional

from pydantic import Field, ValidationInfo, field_validator

from ..core.constants import DEFAULT_SESSION_DURATION, MAX_NOTE_LENGTH, MAX_REASON_LENGTH
from ..core.enums import BookingStatus, SessionFormat, SessionType
from ._strict_base import StrictModel, StrictRequestModel
from .base import Money

DATE_ONLY_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Columns that cannot be cleared once set
REQUIRED_SCHEDULE_FIELDS = (
    "scheduled_date",
    "scheduled_time",
    "duration_minutes",
    "session_format",
)


def _ensure_date_only(value: object, field_name: str) -> object:
    if isinstance(value, str):
        candidate = value.strip()
        if not DATE_ONLY_REGEX.fullmatch(candidate):
            raise ValueError(f"{field_name} must be a YYYY-MM-DD date-only string")
        return candidate
    return value


def _parse_time(value: object) -> object:
    if isinstance(value, str):
        try:
            parts = value.split(":")
            return time(int(parts[0]), int(parts[1]))
        except (ValueError, IndexError):
            raise ValueError(f"Invalid time format: {value}. Expected HH:MM format.")
    return value


class BookingCreate(StrictRequestModel):
    """Parent's booking request."""

    tutor_id: str = Field(..., description="Tutor (teacher user) to book")
    child_id: Optional[str] = Field(None, description="Child the session is for")
    subject: str = Field(..., min_length=1, max_length=100)
    session_type: SessionType = SessionType.REGULAR
    scheduled_date: date
    scheduled_time: time
    duration_minutes: int = Field(DEFAULT_SESSION_DURATION, gt=0)
    session_format: SessionFormat = SessionFormat.ONLINE
    location: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    session_fee: Optional[Money] = None
    special_requirements: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    # Accepted for client compatibility; new bookings always start pending
    status: Optional[BookingStatus] = Field(None, description="Ignored on creation")

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        return _ensure_date_only(v, "scheduled_date")

    @field_validator("scheduled_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return _parse_time(v)


class BookingUpdate(StrictRequestModel):
    """Editable booking details. Schedule fields are parent-only."""

    scheduled_date: Optional[date] = None
    scheduled_time: Optional[time] = None
    duration_minutes: Optional[int] = Field(None, gt=0)
    session_format: Optional[SessionFormat] = None
    location: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    special_requirements: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)

    @field_validator(*REQUIRED_SCHEDULE_FIELDS, mode="before")
    @classmethod
    def _reject_null(cls, v: object, info: ValidationInfo) -> object:
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        return _ensure_date_only(v, "scheduled_date")

    @field_validator("scheduled_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return _parse_time(v)


class BookingStatusUpdate(StrictRequestModel):
    status: BookingStatus
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)


class BookingCancel(StrictRequestModel):
    reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)


class BookingResponse(StrictModel):
    id: str
    booking_reference: str
    parent_id: str
    tutor_id: str
    child_id: Optional[str] = None
    subject: str
    session_type: str
    scheduled_date: date
    scheduled_time: time
    duration_minutes: int
    session_format: str
    location: Optional[str] = None
    session_fee: Optional[Money] = None
    special_requirements: Optional[str] = None
    status: str
    parent_confirmed: bool
    tutor_confirmed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by_id: Optional[str] = None
    cancellation_reason: Optional[str] = None


class BookingStatsResponse(StrictModel):
    total: int
    by_status: Dict[str, int]
    upcoming: int
    completed_hours: float
    total_completed_fees: Money


BookingWindow = Literal["upcoming", "past", "all"]
