# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_user, require_admin, require_user_type
from .database import get_db
from .services import (
    get_booking_service,
    get_child_service,
    get_conversation_service,
    get_dbs_verification_service,
    get_notification_service,
    get_progress_service,
    get_resource_service,
    get_review_service,
    get_storage_client,
    get_tutor_service,
)

__all__ = [
    # Auth
    "get_current_user",
    "require_admin",
    "require_user_type",
    # Database
    "get_db",
    # Services
    "get_booking_service",
    "get_child_service",
    "get_conversation_service",
    "get_dbs_verification_service",
    "get_notification_service",
    "get_progress_service",
    "get_resource_service",
    "get_review_service",
    "get_storage_client",
    "get_tutor_service",
]
