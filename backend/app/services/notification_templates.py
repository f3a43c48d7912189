from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class NotificationTemplate:
    type: str
    title: str
    body_template: str
    url_template: Optional[str] = None
    related_entity_type: Optional[str] = None

    def render_body(self, **context: Any) -> str:
        return self.body_template.format(**context)

    def render_url(self, **context: Any) -> Optional[str]:
        if self.url_template is None:
            return None
        return self.url_template.format(**context)


BOOKING_URL = "/dashboard/bookings/{booking_id}"

BOOKING_REQUEST = NotificationTemplate(
    type="booking_request",
    title="New Booking Request",
    body_template="You have a new booking request for {subject}",
    url_template=BOOKING_URL,
    related_entity_type="booking",
)

# Status change notifications are built per status: booking_<status> / "Booking <Status>"
BOOKING_STATUS_BODY = "Your booking for {subject} has been {status_label} by the {role}"

BOOKING_AWAITING_CONFIRMATION = NotificationTemplate(
    type="booking_awaiting_confirmation",
    title="Booking Awaiting Your Confirmation",
    body_template="The {role} has confirmed the booking for {subject} and is waiting for you",
    url_template=BOOKING_URL,
    related_entity_type="booking",
)

REVIEW_RECEIVED = NotificationTemplate(
    type="review_received",
    title="New Review Received",
    body_template="You received a new review for your {subject} session",
    url_template="/dashboard/reviews",
    related_entity_type="review",
)

DBS_VERIFIED = NotificationTemplate(
    type="dbs_verified",
    title="DBS Certificate Verified",
    body_template="Your DBS certificate {certificate_number} has been verified",
    url_template="/dashboard/dbs",
    related_entity_type="dbs_check",
)

DBS_REJECTED = NotificationTemplate(
    type="dbs_rejected",
    title="DBS Certificate Rejected",
    body_template="Your DBS certificate {certificate_number} could not be verified",
    url_template="/dashboard/dbs",
    related_entity_type="dbs_check",
)

DBS_SUBMITTED = NotificationTemplate(
    type="dbs_submitted",
    title="DBS Certificate Submitted",
    body_template="{tutor_name} uploaded DBS certificate {certificate_number} for review",
    url_template="/admin/dbs",
    related_entity_type="dbs_check",
)


def status_label(status: str) -> str:
    """Human wording of a booking status, e.g. ``no_show`` -> ``no show``."""
    return status.replace("_", " ")


def status_title(status: str) -> str:
    return f"Booking {status_label(status).title()}"
