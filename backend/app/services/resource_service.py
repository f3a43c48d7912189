# backend/app/services/resource_service.py
"""
Resource Service.

Tutors and schools publish learning resources. A resource is visible to its
creator and, once public, to every signed-in user; admins see everything.
Only the creator edits a resource; the creator or an admin may delete it.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.enums import UserType
from ..core.exceptions import ForbiddenException, NotFoundException
from ..models.resource import Resource
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..schemas.resource import ResourceCreate, ResourceUpdate
from .base import BaseService

logger = logging.getLogger(__name__)

CREATOR_TYPES = (UserType.TEACHER.value, UserType.SCHOOL.value)


class ResourceService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_resource_repository(db)

    def _get_visible(self, resource_id: str, user: User) -> Resource:
        resource = self.repository.get_by_id(resource_id)
        if resource is None or not (user.is_admin or resource.is_visible_to(user.id)):
            raise NotFoundException("Resource not found", code="RESOURCE_NOT_FOUND")
        return resource

    @BaseService.measure_operation("create_resource")
    def create_resource(self, user: User, data: ResourceCreate) -> Resource:
        if user.user_type not in CREATOR_TYPES:
            raise ForbiddenException(
                "Only tutors and schools can publish resources", code="RESOURCE_CREATOR_ONLY"
            )
        with self.transaction():
            resource = self.repository.create(created_by=user.id, **data.model_dump())
        self.logger.info(f"Resource {resource.id} created by {user.id}")
        return resource

    @BaseService.measure_operation("list_resources")
    def list_resources(
        self,
        user: User,
        *,
        q: Optional[str] = None,
        resource_type: Optional[str] = None,
        subject: Optional[str] = None,
        grade_level: Optional[str] = None,
        mine_only: bool = False,
        page: int = 1,
        per_page: int = 20,
    ) -> Tuple[List[Resource], int]:
        viewer_id: Optional[str] = user.id
        if user.is_admin and not mine_only:
            viewer_id = None
        return self.repository.search_visible(
            viewer_id,
            q=q,
            resource_type=resource_type,
            subject=subject,
            grade_level=grade_level,
            mine_only=mine_only,
            page=page,
            per_page=per_page,
        )

    def get_resource(self, resource_id: str, user: User) -> Resource:
        return self._get_visible(resource_id, user)

    @BaseService.measure_operation("update_resource")
    def update_resource(self, resource_id: str, user: User, data: ResourceUpdate) -> Resource:
        resource = self._get_visible(resource_id, user)
        if resource.created_by != user.id:
            raise ForbiddenException(
                "Only the creator can edit this resource", code="NOT_RESOURCE_OWNER"
            )
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return resource
        with self.transaction():
            self.repository.apply_changes(resource, **changes)
        return resource

    @BaseService.measure_operation("delete_resource")
    def delete_resource(self, resource_id: str, user: User) -> bool:
        resource = self._get_visible(resource_id, user)
        if resource.created_by != user.id and not user.is_admin:
            raise ForbiddenException(
                "Only the creator can delete this resource", code="NOT_RESOURCE_OWNER"
            )
        with self.transaction():
            deleted = self.repository.delete(resource.id)
        self.logger.info(f"Resource {resource_id} deleted by {user.id}")
        return deleted
