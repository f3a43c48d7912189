# backend/app/core/enums.py
"""
Core enums for the TutorHub platform.

Status and type vocabularies shared by models, schemas and services.
Values are stored lowercase in the database to match the public API.
"""

from enum import Enum


class UserType(str, Enum):
    """Profile specialisations. A profile has exactly one user type."""

    PARENT = "parent"
    TEACHER = "teacher"
    SCHOOL = "school"
    ADMIN = "admin"


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Requested by the parent, awaiting the tutor
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"
    NO_SHOW = "no_show"


class SessionType(str, Enum):
    REGULAR = "regular"
    TRIAL = "trial"
    ASSESSMENT = "assessment"
    MAKEUP = "makeup"


class SessionFormat(str, Enum):
    ONLINE = "online"
    IN_PERSON = "in-person"
    HYBRID = "hybrid"


class PartyRole(str, Enum):
    """Role a caller plays with respect to a specific booking."""

    PARENT = "parent"
    TUTOR = "tutor"
    ADMIN = "admin"


class DBSStatus(str, Enum):
    """DBS certificate verification statuses."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
    EXPIRED = "expired"


class DBSType(str, Enum):
    BASIC = "basic"
    STANDARD = "standard"
    ENHANCED = "enhanced"
    ENHANCED_BARRED = "enhanced_barred"


class ProgressTimeRange(str, Enum):
    ONE_MONTH = "1month"
    THREE_MONTHS = "3months"
    SIX_MONTHS = "6months"
    ONE_YEAR = "1year"
    ALL = "all"


class ProgressTrend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class ResourceType(str, Enum):
    DOCUMENT = "document"
    VIDEO = "video"
    LINK = "link"
    WORKSHEET = "worksheet"
