"""Progress report repository."""

from datetime import date
import logging
from typing import List, Optional, Tuple, cast

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.child import Child
from ..models.progress_report import ProgressReport
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ProgressReportRepository(BaseRepository[ProgressReport]):
    def __init__(self, db: Session):
        super().__init__(db, ProgressReport)

    def list_for_child(
        self,
        child_id: str,
        *,
        subject: Optional[str] = None,
        since: Optional[date] = None,
    ) -> List[ProgressReport]:
        """Reports for a child, oldest session first."""
        query = self.db.query(ProgressReport).filter(ProgressReport.child_id == child_id)
        if subject:
            query = query.filter(func.lower(ProgressReport.subject) == subject.lower())
        if since:
            query = query.filter(ProgressReport.session_date >= since)
        query = query.order_by(ProgressReport.session_date.asc(), ProgressReport.id.asc())
        return cast(List[ProgressReport], self._execute_query(query))

    def list_visible_to(
        self,
        *,
        parent_id: Optional[str] = None,
        tutor_id: Optional[str] = None,
        child_id: Optional[str] = None,
        page: int = 1,
        per_page: int = 20,
    ) -> Tuple[List[ProgressReport], int]:
        """Newest-first reports written by ``tutor_id`` or about ``parent_id``'s children."""
        query = self.db.query(ProgressReport)
        if parent_id is not None:
            query = query.join(Child, Child.id == ProgressReport.child_id).filter(
                Child.parent_id == parent_id
            )
        if tutor_id is not None:
            query = query.filter(ProgressReport.tutor_id == tutor_id)
        if child_id is not None:
            query = query.filter(ProgressReport.child_id == child_id)
        query = query.order_by(ProgressReport.session_date.desc(), ProgressReport.id.desc())
        return self._paginate(query, page, per_page)
