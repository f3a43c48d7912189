# backend/app/repositories/message_repository.py
"""
Message Repository for conversation messages and unread tracking.

A message is unread for every participant except its sender until that
participant marks the conversation read.
"""

from datetime import datetime, timezone
from typing import Dict, List, Sequence, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ..models.conversation import Conversation
from ..models.message import Message
from .base_repository import BaseRepository


class MessageRepository(BaseRepository[Message]):
    def __init__(self, db: Session):
        super().__init__(db, Message)

    def list_for_conversation(
        self, conversation_id: str, page: int = 1, per_page: int = 50
    ) -> Tuple[List[Message], int]:
        """Messages oldest first."""
        query = (
            self.db.query(Message)
            .filter(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        return self._paginate(query, page, per_page)

    def unread_count_for_user(self, user_id: str) -> int:
        """Unread messages from others across all of the user's conversations."""
        count = (
            self.db.query(func.count(Message.id))
            .join(Conversation, Message.conversation_id == Conversation.id)
            .filter(
                or_(Conversation.parent_id == user_id, Conversation.tutor_id == user_id),
                Message.sender_id != user_id,
                Message.is_read.is_(False),
            )
            .scalar()
        )
        return int(count or 0)

    def unread_counts_by_conversation(
        self, conversation_ids: Sequence[str], user_id: str
    ) -> Dict[str, int]:
        if not conversation_ids:
            return {}
        rows = (
            self.db.query(Message.conversation_id, func.count(Message.id))
            .filter(
                Message.conversation_id.in_(list(conversation_ids)),
                Message.sender_id != user_id,
                Message.is_read.is_(False),
            )
            .group_by(Message.conversation_id)
            .all()
        )
        return {conversation_id: int(count) for conversation_id, count in rows}

    def last_messages(self, conversation_ids: Sequence[str]) -> Dict[str, Message]:
        """Most recent message per conversation."""
        if not conversation_ids:
            return {}
        latest = (
            self.db.query(
                Message.conversation_id.label("conversation_id"),
                func.max(Message.created_at).label("created_at"),
            )
            .filter(Message.conversation_id.in_(list(conversation_ids)))
            .group_by(Message.conversation_id)
            .subquery()
        )
        rows = (
            self.db.query(Message)
            .join(
                latest,
                (Message.conversation_id == latest.c.conversation_id)
                & (Message.created_at == latest.c.created_at),
            )
            .order_by(Message.id.asc())
            .all()
        )
        # Ties on created_at resolve to the highest id
        return {message.conversation_id: message for message in rows}

    def mark_conversation_read(self, conversation_id: str, reader_id: str) -> int:
        now = datetime.now(timezone.utc)
        updated = (
            self.db.query(Message)
            .filter(
                Message.conversation_id == conversation_id,
                Message.sender_id != reader_id,
                Message.is_read.is_(False),
            )
            .update({"is_read": True, "read_at": now}, synchronize_session="fetch")
        )
        return int(updated or 0)
