# backend/app/routes/v1/conversations.py
"""
Conversation routes - API v1

Parent-tutor messaging.

Endpoints:
    GET / - The caller's conversations, most recently active first
    POST / - Open (or return) the conversation with another user
    GET /unread-count - Unread messages across all conversations
    GET /{conversation_id}/messages - Messages, oldest first
    POST /{conversation_id}/messages - Send a message
    POST /{conversation_id}/read - Mark the other participant's messages read
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status

from ...api.dependencies import get_conversation_service, get_current_user
from ...core.config import settings
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import PaginatedResponse
from ...schemas.conversation import (
    ConversationCreate,
    ConversationSummary,
    MarkConversationReadResponse,
    MessageCreate,
    MessageResponse,
)
from ...schemas.notifications import UnreadCountResponse
from ...services.conversation_service import ConversationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["conversations-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=PaginatedResponse[ConversationSummary])
async def list_conversations(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> PaginatedResponse[ConversationSummary]:
    summaries, total = await asyncio.to_thread(
        service.list_conversations, current_user, page, per_page
    )
    items = [ConversationSummary.model_validate(s) for s in summaries]
    return PaginatedResponse[ConversationSummary].build(items, total, page, per_page)


@router.post("", response_model=ConversationSummary, status_code=status.HTTP_201_CREATED)
async def start_conversation(
    response: Response,
    payload: ConversationCreate = Body(...),
    current_user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationSummary:
    """201 when the conversation is new, 200 when it already existed."""
    try:
        conversation, created = await asyncio.to_thread(
            service.start_conversation, current_user, payload.participant_id
        )
        summary = await asyncio.to_thread(service.describe, conversation, current_user)
    except DomainException as e:
        handle_domain_exception(e)
    if not created:
        response.status_code = status.HTTP_200_OK
    return ConversationSummary.model_validate(summary)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> UnreadCountResponse:
    count = await asyncio.to_thread(service.unread_count, current_user)
    return UnreadCountResponse(unread_count=count)


@router.get("/{conversation_id}/messages", response_model=PaginatedResponse[MessageResponse])
async def list_messages(
    conversation_id: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> PaginatedResponse[MessageResponse]:
    try:
        messages, total = await asyncio.to_thread(
            service.get_messages, conversation_id, current_user, page, per_page
        )
    except DomainException as e:
        handle_domain_exception(e)
    items = [MessageResponse.model_validate(m) for m in messages]
    return PaginatedResponse[MessageResponse].build(items, total, page, per_page)


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    conversation_id: str,
    payload: MessageCreate = Body(...),
    current_user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> MessageResponse:
    try:
        message = await asyncio.to_thread(
            service.send_message, conversation_id, current_user, payload.content
        )
        return MessageResponse.model_validate(message)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{conversation_id}/read", response_model=MarkConversationReadResponse)
async def mark_conversation_read(
    conversation_id: str,
    current_user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> MarkConversationReadResponse:
    try:
        updated = await asyncio.to_thread(service.mark_read, conversation_id, current_user)
        return MarkConversationReadResponse(updated=updated)
    except DomainException as e:
        handle_domain_exception(e)
