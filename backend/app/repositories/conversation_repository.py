# backend/app/repositories/conversation_repository.py
"""
Conversation Repository for parent-tutor messaging.

Provides data access for conversations between one parent and one tutor.
"""

from datetime import datetime
from typing import List, Optional, Tuple, cast

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ..models.conversation import Conversation
from .base_repository import BaseRepository


class ConversationRepository(BaseRepository[Conversation]):
    """
    Repository for Conversation entity operations.

    Handles:
    - Finding or creating the conversation for a parent-tutor pair
    - Listing a user's conversations, most recently active first
    - Updating last_message_at when a message is sent
    """

    def __init__(self, db: Session):
        super().__init__(db, Conversation)

    def find_by_pair(self, parent_id: str, tutor_id: str) -> Optional[Conversation]:
        result = (
            self.db.query(Conversation)
            .filter(Conversation.parent_id == parent_id, Conversation.tutor_id == tutor_id)
            .first()
        )
        return cast(Optional[Conversation], result)

    def get_or_create(self, parent_id: str, tutor_id: str) -> Tuple[Conversation, bool]:
        """
        Get the pair's conversation or create it.

        Returns:
            Tuple of (conversation, created) where created is True if new
        """
        existing = self.find_by_pair(parent_id, tutor_id)
        if existing:
            return existing, False
        return self.create(parent_id=parent_id, tutor_id=tutor_id), True

    def list_for_user(
        self, user_id: str, page: int = 1, per_page: int = 20
    ) -> Tuple[List[Conversation], int]:
        query = (
            self.db.query(Conversation)
            .filter(or_(Conversation.parent_id == user_id, Conversation.tutor_id == user_id))
            .order_by(
                func.coalesce(Conversation.last_message_at, Conversation.created_at).desc(),
                Conversation.id.desc(),
            )
        )
        return self._paginate(query, page, per_page)

    def touch_last_message(self, conversation: Conversation, sent_at: datetime) -> None:
        conversation.last_message_at = sent_at
        self.db.flush()
