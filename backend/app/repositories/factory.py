# backend/app/repositories/factory.py
"""
Repository Factory for the TutorHub platform.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .child_repository import ChildRepository
    from .conversation_repository import ConversationRepository
    from .dbs_check_repository import DBSCheckRepository
    from .message_repository import MessageRepository
    from .notification_repository import NotificationRepository
    from .progress_report_repository import ProgressReportRepository
    from .resource_repository import ResourceRepository
    from .review_repository import ReviewRepository
    from .tutor_profile_repository import TutorProfileRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_child_repository(db: Session) -> "ChildRepository":
        from .child_repository import ChildRepository

        return ChildRepository(db)

    @staticmethod
    def create_conversation_repository(db: Session) -> "ConversationRepository":
        from .conversation_repository import ConversationRepository

        return ConversationRepository(db)

    @staticmethod
    def create_dbs_check_repository(db: Session) -> "DBSCheckRepository":
        from .dbs_check_repository import DBSCheckRepository

        return DBSCheckRepository(db)

    @staticmethod
    def create_message_repository(db: Session) -> "MessageRepository":
        from .message_repository import MessageRepository

        return MessageRepository(db)

    @staticmethod
    def create_notification_repository(db: Session) -> "NotificationRepository":
        from .notification_repository import NotificationRepository

        return NotificationRepository(db)

    @staticmethod
    def create_progress_report_repository(db: Session) -> "ProgressReportRepository":
        from .progress_report_repository import ProgressReportRepository

        return ProgressReportRepository(db)

    @staticmethod
    def create_resource_repository(db: Session) -> "ResourceRepository":
        from .resource_repository import ResourceRepository

        return ResourceRepository(db)

    @staticmethod
    def create_review_repository(db: Session) -> "ReviewRepository":
        from .review_repository import ReviewRepository

        return ReviewRepository(db)

    @staticmethod
    def create_tutor_profile_repository(db: Session) -> "TutorProfileRepository":
        from .tutor_profile_repository import TutorProfileRepository

        return TutorProfileRepository(db)

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        from .user_repository import UserRepository

        return UserRepository(db)
