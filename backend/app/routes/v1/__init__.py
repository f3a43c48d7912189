# backend/app/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
All new endpoints should be added here.
"""

from . import (
    admin_dbs,
    bookings,
    children,
    conversations,
    dbs,
    health,
    notifications,
    progress,
    resources,
    reviews,
    tutors,
)

__all__ = [
    "admin_dbs",
    "bookings",
    "children",
    "conversations",
    "dbs",
    "health",
    "notifications",
    "progress",
    "resources",
    "reviews",
    "tutors",
]
