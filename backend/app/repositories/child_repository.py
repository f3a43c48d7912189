"""Child repository: parent-scoped data access for child profiles."""

import logging
from typing import List, Optional, cast

from sqlalchemy.orm import Session

from ..models.child import Child
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ChildRepository(BaseRepository[Child]):
    def __init__(self, db: Session):
        super().__init__(db, Child)

    def list_for_parent(self, parent_id: str) -> List[Child]:
        query = (
            self.db.query(Child)
            .filter(Child.parent_id == parent_id)
            .order_by(Child.created_at.asc(), Child.id.asc())
        )
        return cast(List[Child], self._execute_query(query))

    def get_for_parent(self, child_id: str, parent_id: str) -> Optional[Child]:
        return cast(
            Optional[Child],
            self.db.query(Child)
            .filter(Child.id == child_id, Child.parent_id == parent_id)
            .first(),
        )
