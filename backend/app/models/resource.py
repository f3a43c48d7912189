# backend/app/models/resource.py
"""Learning resources shared by tutors and schools."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import ResourceType
from ..database import Base


class Resource(Base):
    """
    A document, video, link or worksheet in the resource library.

    Private resources are visible only to their creator; public ones to every
    signed-in user.
    """

    __tablename__ = "resources"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    created_by = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    resource_type = Column(String(20), nullable=False, default=ResourceType.DOCUMENT.value)
    subject = Column(String(100), nullable=True)
    grade_level = Column(String(50), nullable=True)
    file_url = Column(String(500), nullable=True)
    external_url = Column(String(500), nullable=True)
    is_public = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    creator = relationship("User", foreign_keys=[created_by])

    __table_args__ = (
        CheckConstraint(
            "resource_type IN ('document', 'video', 'link', 'worksheet')",
            name="ck_resources_type",
        ),
    )

    def __repr__(self) -> str:
        return f"<Resource {self.id}: {self.title} ({self.resource_type})>"

    def is_visible_to(self, user_id: str) -> bool:
        return bool(self.is_public) or self.created_by == user_id


__all__ = ["Resource"]
