"""Progress report schemas."""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..core.constants import MAX_NOTE_LENGTH
from ._strict_base import StrictModel, StrictRequestModel


class ProgressReportCreate(StrictRequestModel):
    child_id: str
    booking_id: Optional[str] = None
    subject: str = Field(..., min_length=1, max_length=100)
    session_date: date
    progress_notes: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    skills_improved: List[str] = Field(default_factory=list)
    areas_for_improvement: List[str] = Field(default_factory=list)
    homework_completion: Optional[int] = Field(None, ge=0, le=100)
    attendance_rate: Optional[int] = Field(None, ge=0, le=100)
    overall_rating: Optional[int] = Field(None, ge=1, le=5)
    progress_percentage: Optional[int] = Field(None, ge=0, le=100)


class ProgressReportResponse(StrictModel):
    id: str
    child_id: str
    tutor_id: str
    booking_id: Optional[str] = None
    subject: str
    session_date: date
    progress_notes: Optional[str] = None
    skills_improved: List[str] = Field(default_factory=list)
    areas_for_improvement: List[str] = Field(default_factory=list)
    homework_completion: Optional[int] = None
    attendance_rate: Optional[int] = None
    overall_rating: Optional[int] = None
    progress_percentage: Optional[int] = None
    created_at: Optional[datetime] = None


class SubjectProgress(BaseModel):
    subject: str
    report_count: int
    average_rating: float
    average_progress: float


class ProgressStatsResponse(BaseModel):
    child_id: str
    time_range: str
    subject: Optional[str] = None
    total_reports: int
    average_rating: float
    average_homework_completion: float
    average_attendance: float
    average_progress: float
    trend: str
    by_subject: Dict[str, SubjectProgress] = Field(default_factory=dict)
