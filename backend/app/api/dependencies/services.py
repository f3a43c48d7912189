# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from functools import lru_cache
import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.config import settings
from ...services.booking_service import BookingService
from ...services.child_service import ChildService
from ...services.conversation_service import ConversationService
from ...services.dbs_verification_service import CertificateStorage, DBSVerificationService
from ...services.notification_service import NotificationService
from ...services.progress_service import ProgressService
from ...services.r2_storage_client import R2StorageClient
from ...services.resource_service import ResourceService
from ...services.review_service import ReviewService
from ...services.storage_memory_client import MemoryStorageClient
from ...services.tutor_service import TutorService
from .database import get_db

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_storage_client() -> CertificateStorage:
    """Singleton certificate store selected by ``settings.storage_backend``."""
    if settings.storage_backend == "r2":
        logger.info("Using R2 storage for DBS certificates")
        return R2StorageClient()
    logger.info("Using in-memory storage for DBS certificates")
    return MemoryStorageClient()


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """
    Get notification service instance.

    Args:
        db: Database session

    Returns:
        NotificationService instance
    """
    return NotificationService(db)


def get_booking_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> BookingService:
    """
    Get booking service instance.

    Args:
        db: Database session
        notification_service: Notification service sharing the same session

    Returns:
        BookingService instance
    """
    return BookingService(db, notification_service)


def get_dbs_verification_service(
    db: Session = Depends(get_db),
    storage: CertificateStorage = Depends(get_storage_client),
    notification_service: NotificationService = Depends(get_notification_service),
) -> DBSVerificationService:
    return DBSVerificationService(db, storage, notification_service)


def get_review_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> ReviewService:
    return ReviewService(db, notification_service)


def get_child_service(db: Session = Depends(get_db)) -> ChildService:
    return ChildService(db)


def get_progress_service(db: Session = Depends(get_db)) -> ProgressService:
    return ProgressService(db)


def get_tutor_service(db: Session = Depends(get_db)) -> TutorService:
    return TutorService(db)


def get_conversation_service(db: Session = Depends(get_db)) -> ConversationService:
    return ConversationService(db)


def get_resource_service(db: Session = Depends(get_db)) -> ResourceService:
    return ResourceService(db)
