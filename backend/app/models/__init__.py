"""
Database models for the TutorHub platform.

This module exports all SQLAlchemy models used in the application.
The models are organized by functionality:
- Users and tutor profiles
- Children owned by parents
- Bookings and their notifications
- Parent-tutor conversations and messages
- Shared learning resources
- Progress reports and reviews
- DBS certificate verification
"""

from .booking import Booking, generate_booking_reference
from .child import Child
from .conversation import Conversation
from .dbs_check import DBSCheck
from .message import Message
from .notification import Notification
from .progress_report import ProgressReport
from .resource import Resource
from .review import Review
from .tutor_profile import TutorProfile
from .user import User

__all__ = [
    "Booking",
    "Child",
    "Conversation",
    "DBSCheck",
    "Message",
    "Notification",
    "ProgressReport",
    "Resource",
    "Review",
    "TutorProfile",
    "User",
    "generate_booking_reference",
]
