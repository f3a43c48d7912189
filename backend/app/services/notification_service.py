# backend/app/services/notification_service.py
"""
Notification Service for the TutorHub platform.

Writes in-app notifications as side effects of workflow actions and serves
the caller's inbox.

The ``notify_*`` helpers only flush: they run inside the caller's
transaction so the notification commits or rolls back together with the
change that triggered it. Inbox operations own their own transaction.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.enums import PartyRole
from ..core.exceptions import NotFoundException
from ..models.booking import Booking
from ..models.dbs_check import DBSCheck
from ..models.notification import Notification
from ..models.review import Review
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .notification_templates import (
    BOOKING_AWAITING_CONFIRMATION,
    BOOKING_REQUEST,
    BOOKING_STATUS_BODY,
    BOOKING_URL,
    DBS_REJECTED,
    DBS_SUBMITTED,
    DBS_VERIFIED,
    REVIEW_RECEIVED,
    NotificationTemplate,
    status_label,
    status_title,
)

logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    """Central in-app notification service."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.notification_repository = RepositoryFactory.create_notification_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)

    # Side effects (caller owns the transaction)

    def notify(
        self,
        user_id: str,
        notification_type: str,
        title: str,
        message: str,
        *,
        action_url: Optional[str] = None,
        related_entity_id: Optional[str] = None,
        related_entity_type: Optional[str] = None,
    ) -> Notification:
        notification = self.notification_repository.create_notification(
            user_id=user_id,
            notification_type=notification_type,
            title=title,
            message=message,
            action_url=action_url,
            related_entity_id=related_entity_id,
            related_entity_type=related_entity_type,
        )
        self.logger.debug(f"Queued {notification_type} notification for user {user_id}")
        return notification

    def _from_template(
        self, template: NotificationTemplate, user_id: str, entity_id: str, **context: str
    ) -> Notification:
        return self.notify(
            user_id,
            template.type,
            template.title,
            template.render_body(**context),
            action_url=template.render_url(**context),
            related_entity_id=entity_id,
            related_entity_type=template.related_entity_type,
        )

    def notify_booking_request(self, booking: Booking) -> Notification:
        return self._from_template(
            BOOKING_REQUEST,
            booking.tutor_id,
            booking.id,
            subject=booking.subject,
            booking_id=booking.id,
        )

    @staticmethod
    def _counterparties(booking: Booking, actor_role: PartyRole) -> List[str]:
        if actor_role == PartyRole.PARENT:
            return [booking.tutor_id]
        if actor_role == PartyRole.TUTOR:
            return [booking.parent_id]
        return [booking.parent_id, booking.tutor_id]

    def notify_booking_status(
        self, booking: Booking, status: str, actor_role: PartyRole
    ) -> List[Notification]:
        """
        Tell the counterparty that ``actor_role`` moved the booking to ``status``.

        Parent actions notify the tutor, tutor actions notify the parent and
        admin actions notify both parties.
        """
        recipients = self._counterparties(booking, actor_role)
        message = BOOKING_STATUS_BODY.format(
            subject=booking.subject, status_label=status_label(status), role=actor_role.value
        )
        return [
            self.notify(
                recipient,
                f"booking_{status}",
                status_title(status),
                message,
                action_url=BOOKING_URL.format(booking_id=booking.id),
                related_entity_id=booking.id,
                related_entity_type="booking",
            )
            for recipient in recipients
        ]

    def notify_awaiting_confirmation(
        self, booking: Booking, actor_role: PartyRole
    ) -> List[Notification]:
        """Ask the other party to confirm a booking the actor has already confirmed."""
        return [
            self._from_template(
                BOOKING_AWAITING_CONFIRMATION,
                recipient,
                booking.id,
                role=actor_role.value,
                subject=booking.subject,
                booking_id=booking.id,
            )
            for recipient in self._counterparties(booking, actor_role)
        ]

    def notify_review_received(self, review: Review, subject: str) -> Notification:
        return self._from_template(REVIEW_RECEIVED, review.tutor_id, review.id, subject=subject)

    def notify_dbs_reviewed(self, record: DBSCheck) -> Notification:
        template = DBS_VERIFIED if record.status == "verified" else DBS_REJECTED
        return self._from_template(
            template, record.tutor_id, record.id, certificate_number=record.certificate_number
        )

    def notify_admins_dbs_submitted(self, record: DBSCheck, tutor: User) -> List[Notification]:
        return [
            self._from_template(
                DBS_SUBMITTED,
                admin_id,
                record.id,
                tutor_name=tutor.display_name,
                certificate_number=record.certificate_number,
            )
            for admin_id in self.user_repository.list_admin_ids()
        ]

    # Inbox

    @BaseService.measure_operation("list_notifications")
    def list_notifications(
        self, user: User, *, unread_only: bool = False, page: int = 1, per_page: int = 20
    ) -> Tuple[List[Notification], int]:
        items = self.notification_repository.get_user_notifications(
            user.id, limit=per_page, offset=(page - 1) * per_page, unread_only=unread_only
        )
        total = self.notification_repository.get_user_notification_count(
            user.id, unread_only=unread_only
        )
        return items, total

    def unread_count(self, user: User) -> int:
        return self.notification_repository.get_unread_count(user.id)

    @BaseService.measure_operation("mark_notification_read")
    def mark_read(self, user: User, notification_id: str) -> Notification:
        notification = self.notification_repository.get_for_user(user.id, notification_id)
        if notification is None:
            raise NotFoundException("Notification not found", code="NOTIFICATION_NOT_FOUND")
        with self.transaction():
            notification.mark_read()
        return notification

    @BaseService.measure_operation("mark_all_notifications_read")
    def mark_all_read(self, user: User) -> int:
        with self.transaction():
            updated = self.notification_repository.mark_all_as_read(user.id)
        self.logger.info(f"Marked {updated} notifications read for user {user.id}")
        return updated
