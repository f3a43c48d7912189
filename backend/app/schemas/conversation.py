"""Conversation and message schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..core.constants import MAX_MESSAGE_LENGTH
from ._strict_base import StrictModel, StrictRequestModel


class ConversationCreate(StrictRequestModel):
    participant_id: str = Field(..., min_length=1, description="The other user in the conversation")


class ConversationSummary(StrictModel):
    id: str
    parent_id: str
    tutor_id: str
    other_participant_id: str
    other_participant_name: str
    last_message_at: Optional[datetime] = None
    last_message_preview: Optional[str] = None
    unread_count: int = 0
    created_at: datetime


class MessageCreate(StrictRequestModel):
    content: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)


class MessageResponse(StrictModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime


class MarkConversationReadResponse(BaseModel):
    updated: int
