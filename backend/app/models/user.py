# backend/app/models/user.py
"""
User (profile) model for the TutorHub platform.

Every actor in the system is a User. The ``user_type`` column specialises the
profile into a parent, teacher (tutor), school or admin account. Teachers
additionally own a TutorProfile and, optionally, a DBS certificate record.
"""

import logging

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.enums import UserType
from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


class User(Base):
    """
    Base user identity record.

    Attributes:
        id: ULID primary key
        email: Unique email address
        full_name: Display name
        user_type: parent, teacher, school or admin
        is_active: Whether the account may act on the platform

    Relationships:
        tutor_profile: One-to-one with TutorProfile (teachers only)
        children: One-to-many with Child (parents only)
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String(120), nullable=True)
    phone = Column(String(20), nullable=True)
    user_type = Column(String(20), nullable=False, default=UserType.PARENT.value, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    tutor_profile = relationship("TutorProfile", back_populates="user", uselist=False)
    children = relationship("Child", back_populates="parent", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(
            "user_type IN ('parent', 'teacher', 'school', 'admin')",
            name="ck_users_user_type",
        ),
    )

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email} ({self.user_type})>"

    @property
    def is_admin(self) -> bool:
        return self.user_type == UserType.ADMIN.value

    @property
    def display_name(self) -> str:
        return self.full_name or self.email
