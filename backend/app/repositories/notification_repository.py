"""Repository for in-app notification inbox entries."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, cast

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.notification import Notification
from .base_repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Data access for notification inbox entries."""

    def __init__(self, db: Session) -> None:
        super().__init__(db, Notification)

    def create_notification(
        self,
        user_id: str,
        notification_type: str,
        title: str,
        message: str,
        action_url: str | None = None,
        related_entity_id: str | None = None,
        related_entity_type: str | None = None,
    ) -> Notification:
        return self.create(
            user_id=user_id,
            notification_type=notification_type,
            title=title,
            message=message,
            action_url=action_url,
            related_entity_id=related_entity_id,
            related_entity_type=related_entity_type,
            is_read=False,
        )

    def get_user_notifications(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
    ) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        query = (
            query.order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return cast(List[Notification], query.all())

    def get_user_notification_count(self, user_id: str, unread_only: bool = False) -> int:
        query = self.db.query(func.count(Notification.id)).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return int(query.scalar() or 0)

    def get_unread_count(self, user_id: str) -> int:
        return self.get_user_notification_count(user_id, unread_only=True)

    def get_for_user(self, user_id: str, notification_id: str) -> Optional[Notification]:
        query = self.db.query(Notification).filter(
            Notification.id == notification_id, Notification.user_id == user_id
        )
        return cast(Optional[Notification], query.first())

    def find_for_entity(self, related_entity_id: str) -> List[Notification]:
        query = (
            self.db.query(Notification)
            .filter(Notification.related_entity_id == related_entity_id)
            .order_by(Notification.created_at.asc())
        )
        return cast(List[Notification], query.all())

    def mark_all_as_read(self, user_id: str) -> int:
        now = datetime.now(timezone.utc)
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({"is_read": True, "read_at": now}, synchronize_session="fetch")
        )
        return int(updated or 0)
