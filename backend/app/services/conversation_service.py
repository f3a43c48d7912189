# backend/app/services/conversation_service.py
"""
Conversation Service for parent-tutor messaging.

A parent and a tutor share one conversation. Either side may open it and
post messages; messages stay unread for the recipient until they mark the
conversation read. Non-participants get not-found.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.constants import MESSAGE_PREVIEW_LENGTH
from ..core.enums import UserType
from ..core.exceptions import BusinessRuleException, ForbiddenException, NotFoundException
from ..models.conversation import Conversation
from ..models.message import Message
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

# Caller type -> the user type it may message
_COUNTERPART_TYPE = {
    UserType.PARENT.value: UserType.TEACHER.value,
    UserType.TEACHER.value: UserType.PARENT.value,
}


def _preview(content: str) -> str:
    if len(content) <= MESSAGE_PREVIEW_LENGTH:
        return content
    return content[: MESSAGE_PREVIEW_LENGTH - 3].rstrip() + "..."


class ConversationService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.conversation_repository = RepositoryFactory.create_conversation_repository(db)
        self.message_repository = RepositoryFactory.create_message_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)

    def _get_for_participant(self, conversation_id: str, user: User) -> Conversation:
        conversation = self.conversation_repository.get_by_id(conversation_id)
        if conversation is None or not conversation.is_participant(user.id):
            raise NotFoundException("Conversation not found", code="CONVERSATION_NOT_FOUND")
        return conversation

    @BaseService.measure_operation("start_conversation")
    def start_conversation(self, user: User, participant_id: str) -> Tuple[Conversation, bool]:
        """
        Open (or return) the conversation between ``user`` and ``participant_id``.

        Returns:
            Tuple of (conversation, created)

        Raises:
            ForbiddenException: caller is neither a parent nor a tutor
            NotFoundException: the other user does not exist or is inactive
            BusinessRuleException: the other user is not a valid counterpart
        """
        counterpart_type = _COUNTERPART_TYPE.get(user.user_type)
        if counterpart_type is None:
            raise ForbiddenException(
                "Only parents and tutors can use messaging", code="MESSAGING_NOT_ALLOWED"
            )
        other = self.user_repository.get_active(participant_id)
        if other is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        if other.id == user.id or other.user_type != counterpart_type:
            raise BusinessRuleException(
                "Conversations are between a parent and a tutor",
                code="INVALID_PARTICIPANT",
                details={"participant_id": participant_id},
            )

        if user.user_type == UserType.PARENT.value:
            parent_id, tutor_id = user.id, other.id
        else:
            parent_id, tutor_id = other.id, user.id
        with self.transaction():
            conversation, created = self.conversation_repository.get_or_create(parent_id, tutor_id)
        if created:
            self.logger.info(f"Conversation {conversation.id} opened by {user.id}")
        return conversation, created

    @BaseService.measure_operation("list_conversations")
    def list_conversations(
        self, user: User, page: int = 1, per_page: int = 20
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Conversation summaries with the last message preview and unread count."""
        conversations, total = self.conversation_repository.list_for_user(user.id, page, per_page)
        ids = [c.id for c in conversations]
        unread = self.message_repository.unread_counts_by_conversation(ids, user.id)
        last = self.message_repository.last_messages(ids)

        summaries = []
        for conversation in conversations:
            last_message = last.get(conversation.id)
            summaries.append(
                self.summarize(
                    conversation,
                    user,
                    last_message_preview=_preview(last_message.content) if last_message else None,
                    unread_count=unread.get(conversation.id, 0),
                )
            )
        return summaries, total

    @staticmethod
    def summarize(
        conversation: Conversation,
        user: User,
        *,
        last_message_preview: Optional[str] = None,
        unread_count: int = 0,
    ) -> Dict[str, Any]:
        """Summary of ``conversation`` from ``user``'s side."""
        other = conversation.tutor if conversation.parent_id == user.id else conversation.parent
        return {
            "id": conversation.id,
            "parent_id": conversation.parent_id,
            "tutor_id": conversation.tutor_id,
            "other_participant_id": other.id,
            "other_participant_name": other.display_name,
            "last_message_at": conversation.last_message_at,
            "last_message_preview": last_message_preview,
            "unread_count": unread_count,
            "created_at": conversation.created_at,
        }

    def describe(self, conversation: Conversation, user: User) -> Dict[str, Any]:
        """Single conversation summary with its preview and unread count."""
        last_message = self.message_repository.last_messages([conversation.id]).get(conversation.id)
        unread = self.message_repository.unread_counts_by_conversation([conversation.id], user.id)
        return self.summarize(
            conversation,
            user,
            last_message_preview=_preview(last_message.content) if last_message else None,
            unread_count=unread.get(conversation.id, 0),
        )

    def get_messages(
        self, conversation_id: str, user: User, page: int = 1, per_page: int = 50
    ) -> Tuple[List[Message], int]:
        conversation = self._get_for_participant(conversation_id, user)
        return self.message_repository.list_for_conversation(conversation.id, page, per_page)

    @BaseService.measure_operation("send_message")
    def send_message(self, conversation_id: str, user: User, content: str) -> Message:
        """Append a message and bump the conversation's ``last_message_at``."""
        conversation = self._get_for_participant(conversation_id, user)
        with self.transaction():
            message = self.message_repository.create(
                conversation_id=conversation.id,
                sender_id=user.id,
                content=content,
                is_read=False,
            )
            self.conversation_repository.touch_last_message(conversation, message.created_at)
        self.logger.debug(f"Message {message.id} sent in conversation {conversation.id}")
        return message

    @BaseService.measure_operation("mark_conversation_read")
    def mark_read(self, conversation_id: str, user: User) -> int:
        """Mark every message from the other participant read."""
        conversation = self._get_for_participant(conversation_id, user)
        with self.transaction():
            updated = self.message_repository.mark_conversation_read(conversation.id, user.id)
        return updated

    def unread_count(self, user: User) -> int:
        return self.message_repository.unread_count_for_user(user.id)
