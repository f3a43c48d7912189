# backend/app/repositories/__init__.py
"""
Repository Pattern Implementation for the TutorHub platform.

This package provides the repository layer for data access,
separating business logic from database queries.

Usage:
    from app.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_booking_repository(db)
    bookings, total = repository.list_for_user(user_id, today=today)
"""

from .base_repository import BaseRepository, IRepository
from .booking_repository import BookingRepository
from .child_repository import ChildRepository
from .conversation_repository import ConversationRepository
from .dbs_check_repository import DBSCheckRepository
from .factory import RepositoryFactory
from .message_repository import MessageRepository
from .notification_repository import NotificationRepository
from .progress_report_repository import ProgressReportRepository
from .resource_repository import ResourceRepository
from .review_repository import ReviewRepository
from .tutor_profile_repository import TutorProfileRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "ChildRepository",
    "ConversationRepository",
    "DBSCheckRepository",
    "IRepository",
    "MessageRepository",
    "NotificationRepository",
    "ProgressReportRepository",
    "RepositoryFactory",
    "ResourceRepository",
    "ReviewRepository",
    "TutorProfileRepository",
    "UserRepository",
]
