# backend/app/models/conversation.py
"""
Conversation model for parent-tutor messaging.

Each parent-tutor pair has exactly one conversation, whether or not they
have a booking together. Messages belong to the conversation.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class Conversation(Base):
    """
    Conversation between one parent and one tutor.

    Attributes:
        id: ULID primary key
        parent_id: The parent (User)
        tutor_id: The tutor (teacher User)
        created_at: When the conversation was opened
        last_message_at: When the most recent message was sent
    """

    __tablename__ = "conversations"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    parent_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    tutor_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=lambda: datetime.now(timezone.utc),
    )
    last_message_at = Column(DateTime(timezone=True), nullable=True)

    parent = relationship("User", foreign_keys=[parent_id])
    tutor = relationship("User", foreign_keys=[tutor_id])
    messages = relationship(
        "Message",
        back_populates="conversation",
        order_by="Message.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("parent_id", "tutor_id", name="uq_conversations_pair"),
        Index("idx_conversations_tutor", "tutor_id"),
        Index("idx_conversations_last_message", "last_message_at"),
    )

    def __repr__(self) -> str:
        return f"<Conversation(id={self.id}, parent={self.parent_id}, tutor={self.tutor_id})>"

    def is_participant(self, user_id: str) -> bool:
        return user_id in (self.parent_id, self.tutor_id)

    def get_other_user_id(self, current_user_id: str) -> str:
        """ID of the participant who is not ``current_user_id``."""
        if current_user_id == self.parent_id:
            return str(self.tutor_id)
        return str(self.parent_id)


__all__ = ["Conversation"]
