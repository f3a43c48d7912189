# backend/app/routes/v1/notifications.py
"""
Notification inbox routes - API v1

Endpoints:
    GET / - The caller's notifications, newest first
    GET /unread-count - Number of unread notifications
    POST /read-all - Mark every notification read
    POST /{notification_id}/read - Mark one notification read
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies import get_current_user, get_notification_service
from ...core.config import settings
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import PaginatedResponse
from ...schemas.notifications import (
    MarkAllReadResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from ...services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=PaginatedResponse[NotificationResponse])
async def list_notifications(
    unread_only: bool = Query(False),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> PaginatedResponse[NotificationResponse]:
    notifications, total = await asyncio.to_thread(
        service.list_notifications,
        current_user,
        unread_only=unread_only,
        page=page,
        per_page=per_page,
    )
    items = [NotificationResponse.model_validate(n) for n in notifications]
    return PaginatedResponse[NotificationResponse].build(items, total, page, per_page)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> UnreadCountResponse:
    count = await asyncio.to_thread(service.unread_count, current_user)
    return UnreadCountResponse(unread_count=count)


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> MarkAllReadResponse:
    try:
        updated = await asyncio.to_thread(service.mark_all_read, current_user)
        return MarkAllReadResponse(updated=updated)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    try:
        notification = await asyncio.to_thread(service.mark_read, current_user, notification_id)
        return NotificationResponse.model_validate(notification)
    except DomainException as e:
        handle_domain_exception(e)
