# backend/app/services/child_service.py
"""
Child Service.

Parents manage their own children. A child belonging to another parent is
reported as not found. Tutors may read a child they have a booking with.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ..core.enums import UserType
from ..core.exceptions import ForbiddenException, NotFoundException
from ..models.child import Child
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..schemas.child import ChildCreate, ChildUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


def _child_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    # academic_levels arrive as models; store plain JSON
    levels = payload.get("academic_levels")
    if levels is not None:
        payload["academic_levels"] = {
            subject: (level.model_dump() if hasattr(level, "model_dump") else dict(level))
            for subject, level in levels.items()
        }
    return payload


class ChildService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_child_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @staticmethod
    def _require_parent(user: User) -> None:
        if user.user_type != UserType.PARENT.value:
            raise ForbiddenException("Only parents can manage children", code="PARENT_ONLY")

    def _get_owned(self, child_id: str, parent: User) -> Child:
        child = self.repository.get_for_parent(child_id, parent.id)
        if child is None:
            raise NotFoundException("Child not found", code="CHILD_NOT_FOUND")
        return child

    @BaseService.measure_operation("create_child")
    def create_child(self, parent: User, data: ChildCreate) -> Child:
        self._require_parent(parent)
        fields = _child_fields(data.model_dump())
        with self.transaction():
            child = self.repository.create(parent_id=parent.id, **fields)
        self.logger.info(f"Child {child.id} created for parent {parent.id}")
        return child

    def list_children(self, parent: User) -> List[Child]:
        self._require_parent(parent)
        return self.repository.list_for_parent(parent.id)

    def get_child(self, child_id: str, user: User) -> Child:
        """Owner parent, an admin, or a tutor with a booking for the child."""
        if user.user_type == UserType.PARENT.value:
            return self._get_owned(child_id, user)

        child = self.repository.get_by_id(child_id)
        if child is None:
            raise NotFoundException("Child not found", code="CHILD_NOT_FOUND")
        if user.user_type == UserType.ADMIN.value:
            return child
        if user.user_type == UserType.TEACHER.value and self.booking_repository.has_booking_between(
            user.id, child.id, exclude_cancelled=False
        ):
            return child
        raise NotFoundException("Child not found", code="CHILD_NOT_FOUND")

    @BaseService.measure_operation("update_child")
    def update_child(self, child_id: str, parent: User, data: ChildUpdate) -> Child:
        self._require_parent(parent)
        child = self._get_owned(child_id, parent)
        changes = _child_fields(data.model_dump(exclude_unset=True))
        if not changes:
            return child
        with self.transaction():
            self.repository.apply_changes(child, **changes)
        return child

    @BaseService.measure_operation("delete_child")
    def delete_child(self, child_id: str, parent: User) -> bool:
        """Remove the child; its bookings stay with ``child_id`` cleared."""
        self._require_parent(parent)
        child = self._get_owned(child_id, parent)
        with self.transaction():
            deleted = self.repository.delete(child.id)
        self.logger.info(f"Child {child_id} deleted by parent {parent.id}")
        return deleted
