# backend/app/repositories/user_repository.py
"""
User Repository for the TutorHub platform.

Provides basic lookups used by identity resolution and by services that need
to validate the other party of an action.
"""

import logging
from typing import List, Optional, cast

from sqlalchemy.orm import Session

from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User data access."""

    def __init__(self, db: Session):
        super().__init__(db, User)
        self.logger = logging.getLogger(__name__)

    def get_active(self, user_id: str) -> Optional[User]:
        """Active user by id, used for token subject resolution."""
        return cast(
            Optional[User],
            self.db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first(),
        )

    def list_admin_ids(self) -> List[str]:
        rows = self.db.query(User.id).filter(User.user_type == "admin", User.is_active.is_(True))
        return [cast(str, row.id) for row in rows.all()]
