# backend/app/models/child.py
"""Child profile owned by a parent account."""

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Child(Base):
    """
    A parent's child with free-form academic metadata.

    ``academic_levels`` maps subject -> {"current_level": ..., "target_level": ...}.
    Bookings reference a child by foreign key only; removing a child leaves
    its bookings in place with ``child_id`` cleared.
    """

    __tablename__ = "children"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    parent_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(100), nullable=False)
    age = Column(Integer, nullable=True)
    school_year = Column(String(50), nullable=True)
    special_needs = Column(Text, nullable=True)
    subjects_of_interest = Column(JSON, nullable=False, default=list)
    learning_style = Column(String(50), nullable=True)
    academic_levels = Column(JSON, nullable=False, default=dict)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    parent = relationship("User", back_populates="children")

    __table_args__ = (CheckConstraint("age IS NULL OR age >= 0", name="ck_children_age"),)

    def __repr__(self) -> str:
        return f"<Child {self.id}: {self.name} parent={self.parent_id}>"
