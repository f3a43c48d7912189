# backend/app/services/progress_service.py
"""
Progress Service.

Tutors write session progress reports for children they teach. Parents read
reports about their own children and get aggregated statistics per child.
"""

import calendar
from datetime import date
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_ATTENDANCE_RATE, TREND_RECENT_WINDOW, TREND_THRESHOLD
from ..core.enums import ProgressTimeRange, ProgressTrend, UserType
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..models.progress_report import ProgressReport
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..schemas.progress import ProgressReportCreate
from .base import BaseService

logger = logging.getLogger(__name__)

RANGE_MONTHS = {
    ProgressTimeRange.ONE_MONTH.value: 1,
    ProgressTimeRange.THREE_MONTHS.value: 3,
    ProgressTimeRange.SIX_MONTHS.value: 6,
    ProgressTimeRange.ONE_YEAR.value: 12,
}


def months_before(day: date, months: int) -> date:
    """Same day ``months`` earlier, clamped to the end of shorter months."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def range_start(time_range: str, today: date) -> Optional[date]:
    if time_range == ProgressTimeRange.ALL.value:
        return None
    try:
        return months_before(today, RANGE_MONTHS[time_range])
    except KeyError:
        raise ValidationException(
            f"Invalid time range: {time_range}",
            code="INVALID_TIME_RANGE",
            details={"allowed": [r.value for r in ProgressTimeRange]},
        )


def _mean(values: Sequence[float], default: float = 0.0) -> float:
    return sum(values) / len(values) if values else default


def _ratings(reports: Sequence[ProgressReport]) -> List[float]:
    return [float(r.overall_rating) for r in reports if r.overall_rating is not None]


def compute_trend(reports: Sequence[ProgressReport]) -> str:
    """
    Compare the mean rating of the most recent reports with the older ones.

    ``reports`` must be ordered oldest first. Fewer than two reports, or no
    rated reports on either side, is ``stable``.
    """
    if len(reports) < 2:
        return ProgressTrend.STABLE.value

    recent = _ratings(reports[-TREND_RECENT_WINDOW:])
    older = _ratings(reports[:-TREND_RECENT_WINDOW])
    if not recent or not older:
        return ProgressTrend.STABLE.value

    delta = _mean(recent) - _mean(older)
    if delta > TREND_THRESHOLD:
        return ProgressTrend.IMPROVING.value
    if delta < -TREND_THRESHOLD:
        return ProgressTrend.DECLINING.value
    return ProgressTrend.STABLE.value


def summarize(reports: Sequence[ProgressReport]) -> Dict[str, float]:
    homework = [float(r.homework_completion) for r in reports if r.homework_completion is not None]
    attendance = [float(r.attendance_rate) for r in reports if r.attendance_rate is not None]
    progress = [
        float(r.progress_percentage) for r in reports if r.progress_percentage is not None
    ]
    return {
        "average_rating": round(_mean(_ratings(reports)), 2),
        "average_homework_completion": round(_mean(homework), 2),
        "average_attendance": round(_mean(attendance, DEFAULT_ATTENDANCE_RATE), 2),
        "average_progress": round(_mean(progress), 2),
    }


class ProgressService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_progress_report_repository(db)
        self.child_repository = RepositoryFactory.create_child_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("create_progress_report")
    def create_report(self, tutor: User, data: ProgressReportCreate) -> ProgressReport:
        """Tutor-only; the tutor must hold a non-cancelled booking with the child."""
        if tutor.user_type != UserType.TEACHER.value:
            raise ForbiddenException("Only tutors can write progress reports", code="TUTOR_ONLY")

        child = self.child_repository.get_by_id(data.child_id)
        if child is None:
            raise NotFoundException("Child not found", code="CHILD_NOT_FOUND")
        if not self.booking_repository.has_booking_between(tutor.id, child.id):
            raise ForbiddenException(
                "You have no booking with this child", code="NO_BOOKING_WITH_CHILD"
            )

        if data.booking_id is not None:
            booking = self.booking_repository.get_by_id(data.booking_id)
            if booking is None or booking.tutor_id != tutor.id or booking.child_id != child.id:
                raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")

        with self.transaction():
            report = self.repository.create(tutor_id=tutor.id, **data.model_dump())
        self.logger.info(f"Progress report {report.id} written by tutor {tutor.id}")
        return report

    def list_reports(
        self,
        user: User,
        *,
        child_id: Optional[str] = None,
        page: int = 1,
        per_page: int = 20,
    ) -> Tuple[List[ProgressReport], int]:
        if user.user_type == UserType.PARENT.value:
            return self.repository.list_visible_to(
                parent_id=user.id, child_id=child_id, page=page, per_page=per_page
            )
        if user.user_type == UserType.TEACHER.value:
            return self.repository.list_visible_to(
                tutor_id=user.id, child_id=child_id, page=page, per_page=per_page
            )
        if user.user_type == UserType.ADMIN.value:
            return self.repository.list_visible_to(child_id=child_id, page=page, per_page=per_page)
        raise ForbiddenException("Progress reports are not available", code="FORBIDDEN")

    @BaseService.measure_operation("progress_stats")
    def get_stats(
        self,
        child_id: str,
        user: User,
        *,
        time_range: str = ProgressTimeRange.ALL.value,
        subject: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Dict[str, object]:
        child = self.child_repository.get_by_id(child_id)
        visible = child is not None and (
            user.user_type == UserType.ADMIN.value
            or child.parent_id == user.id
            or (
                user.user_type == UserType.TEACHER.value
                and self.booking_repository.has_booking_between(user.id, child_id)
            )
        )
        if not visible:
            raise NotFoundException("Child not found", code="CHILD_NOT_FOUND")

        since = range_start(time_range, today or self.today())
        reports = self.repository.list_for_child(child_id, subject=subject, since=since)

        grouped: Dict[str, List[ProgressReport]] = {}
        for report in reports:
            grouped.setdefault(report.subject, []).append(report)

        by_subject = {}
        for name, items in grouped.items():
            figures = summarize(items)
            by_subject[name] = {
                "subject": name,
                "report_count": len(items),
                "average_rating": figures["average_rating"],
                "average_progress": figures["average_progress"],
            }

        return {
            "child_id": child_id,
            "time_range": time_range,
            "subject": subject,
            "total_reports": len(reports),
            **summarize(reports),
            "trend": compute_trend(reports),
            "by_subject": by_subject,
        }
