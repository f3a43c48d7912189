"""Application-wide constants for the TutorHub platform."""

from __future__ import annotations

BRAND_NAME = "TutorHub"

API_TITLE = f"{BRAND_NAME} API"
API_VERSION = "1.0.0"
API_DESCRIPTION = (
    "Tutoring marketplace backend: bookings, children, progress reports, reviews, "
    "messaging, learning resources, notifications and DBS certificate verification."
)

# Session duration in minutes
DEFAULT_SESSION_DURATION = 60

# Text constraints
MAX_NOTE_LENGTH = 2000
MAX_REASON_LENGTH = 255

# Messaging
MAX_MESSAGE_LENGTH = 2000
MESSAGE_PREVIEW_LENGTH = 120

# Ratings
MIN_RATING = 1
MAX_RATING = 5

# Progress statistics
TREND_RECENT_WINDOW = 3  # most recent reports compared against the rest
TREND_THRESHOLD = 0.5
DEFAULT_ATTENDANCE_RATE = 100.0

# Storage
DBS_CERTIFICATE_PREFIX = "dbs-certificates"
CONTENT_TYPE_EXTENSIONS = {
    "application/pdf": "pdf",
    "image/jpeg": "jpg",
    "image/png": "png",
}
