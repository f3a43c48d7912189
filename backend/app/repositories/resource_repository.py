# backend/app/repositories/resource_repository.py
"""Repository for the shared learning resource library."""

from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..models.resource import Resource
from .base_repository import BaseRepository


class ResourceRepository(BaseRepository[Resource]):
    def __init__(self, db: Session):
        super().__init__(db, Resource)

    def search_visible(
        self,
        viewer_id: Optional[str],
        *,
        q: Optional[str] = None,
        resource_type: Optional[str] = None,
        subject: Optional[str] = None,
        grade_level: Optional[str] = None,
        mine_only: bool = False,
        page: int = 1,
        per_page: int = 20,
    ) -> Tuple[List[Resource], int]:
        """
        Resources the viewer may see, newest first.

        ``viewer_id=None`` lifts the visibility filter (admin view).
        ``mine_only`` restricts to the viewer's own resources.
        """
        query = self.db.query(Resource)
        if viewer_id is not None:
            if mine_only:
                query = query.filter(Resource.created_by == viewer_id)
            else:
                query = query.filter(
                    or_(Resource.is_public.is_(True), Resource.created_by == viewer_id)
                )
        if q:
            pattern = f"%{q.strip()}%"
            query = query.filter(
                or_(
                    Resource.title.ilike(pattern),
                    Resource.description.ilike(pattern),
                    Resource.subject.ilike(pattern),
                )
            )
        if resource_type:
            query = query.filter(Resource.resource_type == resource_type)
        if subject:
            query = query.filter(Resource.subject.ilike(subject))
        if grade_level:
            query = query.filter(Resource.grade_level.ilike(grade_level))
        query = query.order_by(Resource.created_at.desc(), Resource.id.desc())
        return self._paginate(query, page, per_page)
