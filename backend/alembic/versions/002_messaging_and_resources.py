# backend/alembic/versions/002_messaging_and_resources.py
"""Messaging and resources - conversations, messages, resource library

Revision ID: 002_messaging_and_resources
Revises: 001_initial_schema
Create Date: 2025-02-03 00:00:00.000000

Adds one conversation per parent-tutor pair with its messages, and the
shared learning resource library.
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002_messaging_and_resources"
down_revision: Union[str, None] = "001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create conversations, messages and resources."""
    print("Creating conversations and messages...")

    op.create_table(
        "conversations",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("parent_id", sa.String(26), nullable=False),
        sa.Column("tutor_id", sa.String(26), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["parent_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tutor_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("parent_id", "tutor_id", name="uq_conversations_pair"),
        comment="One conversation per parent-tutor pair",
    )
    op.create_index("idx_conversations_tutor", "conversations", ["tutor_id"])
    op.create_index("idx_conversations_last_message", "conversations", ["last_message_at"])

    op.create_table(
        "messages",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("conversation_id", sa.String(26), nullable=False),
        sa.Column("sender_id", sa.String(26), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["conversation_id"], ["conversations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_messages_conversation_created_at", "messages", ["conversation_id", "created_at"]
    )
    op.create_index("ix_messages_conversation_is_read", "messages", ["conversation_id", "is_read"])

    print("Creating resources...")

    op.create_table(
        "resources",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("created_by", sa.String(26), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("resource_type", sa.String(20), nullable=False, server_default="document"),
        sa.Column("subject", sa.String(100), nullable=True),
        sa.Column("grade_level", sa.String(50), nullable=True),
        sa.Column("file_url", sa.String(500), nullable=True),
        sa.Column("external_url", sa.String(500), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "resource_type IN ('document', 'video', 'link', 'worksheet')",
            name="ck_resources_type",
        ),
        comment="Learning resources shared by tutors and schools",
    )
    op.create_index("ix_resources_created_by", "resources", ["created_by"])
    op.create_index("ix_resources_is_public", "resources", ["is_public"])

    print("Messaging and resources created")


def downgrade() -> None:
    """Drop conversations, messages and resources."""
    print("Dropping messaging and resources...")

    op.drop_table("resources")
    op.drop_table("messages")
    op.drop_table("conversations")
