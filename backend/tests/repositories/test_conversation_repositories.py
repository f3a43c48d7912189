# backend/tests/repositories/test_conversation_repositories.py
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

from app.models.conversation import Conversation
from app.models.message import Message
from app.repositories.conversation_repository import ConversationRepository
from app.repositories.message_repository import MessageRepository


@pytest.fixture
def conversations(db: Session, parent_user, tutor_user, other_tutor):
    rows = [
        Conversation(parent_id=parent_user.id, tutor_id=tutor_user.id),
        Conversation(parent_id=parent_user.id, tutor_id=other_tutor.id),
    ]
    db.add_all(rows)
    db.commit()
    return rows


class TestConversationRepository:
    def test_get_or_create_is_idempotent(self, db, parent_user, tutor_user):
        repo = ConversationRepository(db)

        first, created = repo.get_or_create(parent_user.id, tutor_user.id)
        again, created_again = repo.get_or_create(parent_user.id, tutor_user.id)

        assert created is True
        assert created_again is False
        assert again.id == first.id

    def test_list_for_user_falls_back_to_created_at(self, db, conversations, tutor_user, parent_user):
        quiet, active = conversations
        quiet.created_at = datetime(2025, 1, 1, tzinfo=timezone.utc)
        active.created_at = datetime(2025, 1, 2, tzinfo=timezone.utc)
        quiet.last_message_at = datetime(2025, 1, 5, tzinfo=timezone.utc)
        db.commit()

        items, total = ConversationRepository(db).list_for_user(parent_user.id)
        assert total == 2
        assert [c.id for c in items] == [quiet.id, active.id]

        tutor_items, tutor_total = ConversationRepository(db).list_for_user(tutor_user.id)
        assert tutor_total == 1
        assert tutor_items[0].id == quiet.id


class TestMessageRepository:
    def test_last_messages_and_unread_by_conversation(self, db, conversations, parent_user, tutor_user):
        first, second = conversations
        base = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
        db.add_all(
            [
                Message(conversation_id=first.id, sender_id=parent_user.id, content="a", created_at=base),
                Message(
                    conversation_id=first.id,
                    sender_id=tutor_user.id,
                    content="b",
                    created_at=base + timedelta(minutes=5),
                ),
                Message(conversation_id=second.id, sender_id=parent_user.id, content="c", created_at=base),
            ]
        )
        db.commit()
        repo = MessageRepository(db)

        last = repo.last_messages([first.id, second.id])
        assert last[first.id].content == "b"
        assert last[second.id].content == "c"

        assert repo.unread_counts_by_conversation([first.id, second.id], parent_user.id) == {first.id: 1}
        assert repo.unread_count_for_user(parent_user.id) == 1
        assert repo.unread_count_for_user(tutor_user.id) == 1

    def test_empty_id_lists(self, db, parent_user):
        repo = MessageRepository(db)
        assert repo.last_messages([]) == {}
        assert repo.unread_counts_by_conversation([], parent_user.id) == {}
