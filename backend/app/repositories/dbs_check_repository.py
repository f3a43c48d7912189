# backend/app/repositories/dbs_check_repository.py
"""
DBS certificate repository.

Status filtering works on the *effective* status: a record whose expiry
date has passed counts as expired whatever its stored status is.
"""

from datetime import date, timedelta
import logging
from typing import Dict, List, Optional, Tuple, cast

from sqlalchemy import and_, case, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.sql.elements import ColumnElement

from ..core.enums import DBSStatus
from ..core.exceptions import RepositoryException
from ..models.dbs_check import DBSCheck
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


def _effective_status_expr(today: date) -> ColumnElement:
    return case(
        (
            and_(DBSCheck.expiry_date.is_not(None), DBSCheck.expiry_date < today),
            DBSStatus.EXPIRED.value,
        ),
        else_=DBSCheck.status,
    )


class DBSCheckRepository(BaseRepository[DBSCheck]):
    def __init__(self, db: Session):
        super().__init__(db, DBSCheck)
        self.logger = logging.getLogger(__name__)

    def get_by_tutor_id(self, tutor_id: str) -> Optional[DBSCheck]:
        return cast(
            Optional[DBSCheck],
            self.db.query(DBSCheck).filter(DBSCheck.tutor_id == tutor_id).first(),
        )

    def list_for_admin(
        self,
        *,
        today: date,
        search: Optional[str] = None,
        status: Optional[str] = None,
        dbs_type: Optional[str] = None,
        expiring_within_days: Optional[int] = None,
        page: int = 1,
        per_page: int = 20,
    ) -> Tuple[List[DBSCheck], int]:
        """Newest upload first, with the tutor eager loaded for display."""
        query = (
            self.db.query(DBSCheck)
            .join(User, User.id == DBSCheck.tutor_id)
            .options(joinedload(DBSCheck.tutor))
        )
        if search:
            term = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    User.full_name.ilike(term),
                    User.email.ilike(term),
                    DBSCheck.certificate_number.ilike(term),
                )
            )
        if status:
            query = query.filter(_effective_status_expr(today) == status)
        if dbs_type:
            query = query.filter(DBSCheck.dbs_type == dbs_type)
        if expiring_within_days is not None:
            query = query.filter(
                DBSCheck.expiry_date.is_not(None),
                DBSCheck.expiry_date >= today,
                DBSCheck.expiry_date <= today + timedelta(days=expiring_within_days),
            )
        query = query.order_by(
            DBSCheck.uploaded_at.desc().nulls_last(), DBSCheck.created_at.desc(), DBSCheck.id.desc()
        )
        return self._paginate(query, page, per_page)

    def count_by_effective_status(self, today: date) -> Dict[str, int]:
        try:
            expr = _effective_status_expr(today).label("effective_status")
            rows = self.db.query(expr, func.count(DBSCheck.id)).group_by(expr).all()
            counts = {s.value: 0 for s in DBSStatus}
            for effective_status, count in rows:
                counts[effective_status] = int(count)
            return counts
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting DBS records: {str(e)}")
            raise RepositoryException(f"Failed to count DBS records: {str(e)}")

    def count_expiring_soon(self, today: date, window_days: int) -> int:
        return int(
            self.db.query(func.count(DBSCheck.id))
            .filter(
                DBSCheck.expiry_date.is_not(None),
                DBSCheck.expiry_date >= today,
                DBSCheck.expiry_date <= today + timedelta(days=window_days),
            )
            .scalar()
            or 0
        )

    def mark_overdue_expired(self, today: date) -> int:
        """Persist ``expired`` on pending/verified records past their expiry date."""
        try:
            updated = (
                self.db.query(DBSCheck)
                .filter(
                    DBSCheck.expiry_date.is_not(None),
                    DBSCheck.expiry_date < today,
                    DBSCheck.status.in_([DBSStatus.PENDING.value, DBSStatus.VERIFIED.value]),
                )
                .update({"status": DBSStatus.EXPIRED.value}, synchronize_session="fetch")
            )
            return int(updated or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error expiring DBS records: {str(e)}")
            raise RepositoryException(f"Failed to expire DBS records: {str(e)}")

    def verified_tutor_ids(self, today: date) -> List[str]:
        rows = (
            self.db.query(DBSCheck.tutor_id)
            .filter(_effective_status_expr(today) == DBSStatus.VERIFIED.value)
            .all()
        )
        return [cast(str, row.tutor_id) for row in rows]
