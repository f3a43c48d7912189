# backend/app/models/tutor_profile.py
"""Tutor profile: the public directory entry of a teacher account."""

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class TutorProfile(Base):
    """Teaching details for a teacher user (subjects, levels, pricing, location)."""

    __tablename__ = "tutor_profiles"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    user_id = Column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    bio = Column(Text, nullable=True)
    # Generic JSON for cross-dialect compatibility (SQLite in tests)
    subjects = Column(JSON, nullable=False, default=list)
    levels = Column(JSON, nullable=False, default=list)
    location = Column(String(120), nullable=True, index=True)
    hourly_rate = Column(Numeric(10, 2), nullable=True)
    years_experience = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="tutor_profile")

    __table_args__ = (
        CheckConstraint("years_experience >= 0", name="ck_tutor_profiles_experience"),
        CheckConstraint(
            "hourly_rate IS NULL OR hourly_rate >= 0", name="ck_tutor_profiles_rate_non_negative"
        ),
    )

    def __repr__(self) -> str:
        return f"<TutorProfile {self.id}: user={self.user_id} subjects={self.subjects}>"
