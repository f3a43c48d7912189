"""Notification inbox schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ._strict_base import StrictModel


class NotificationResponse(StrictModel):
    id: str
    notification_type: str
    title: str
    message: str
    action_url: Optional[str] = None
    related_entity_id: Optional[str] = None
    related_entity_type: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated: int
