# backend/app/schemas/review.py
"""Review schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..core.constants import MAX_NOTE_LENGTH, MAX_RATING, MIN_RATING
from ._strict_base import StrictModel, StrictRequestModel


class ReviewCreate(StrictRequestModel):
    booking_id: str
    overall_rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    teaching_quality: Optional[int] = Field(None, ge=MIN_RATING, le=MAX_RATING)
    communication: Optional[int] = Field(None, ge=MIN_RATING, le=MAX_RATING)
    punctuality: Optional[int] = Field(None, ge=MIN_RATING, le=MAX_RATING)
    preparation: Optional[int] = Field(None, ge=MIN_RATING, le=MAX_RATING)
    review_title: Optional[str] = Field(None, max_length=200)
    review_content: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    what_went_well: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    areas_for_improvement: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    would_recommend: Optional[bool] = None


class ReviewModerationRequest(StrictRequestModel):
    is_approved: bool = True
    is_featured: Optional[bool] = None


class ReviewResponse(StrictModel):
    id: str
    booking_id: Optional[str] = None
    tutor_id: str
    reviewer_id: str
    child_id: Optional[str] = None
    subject: Optional[str] = None
    overall_rating: int
    teaching_quality: Optional[int] = None
    communication: Optional[int] = None
    punctuality: Optional[int] = None
    preparation: Optional[int] = None
    review_title: Optional[str] = None
    review_content: Optional[str] = None
    what_went_well: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    would_recommend: Optional[bool] = None
    is_approved: bool
    is_featured: bool
    created_at: datetime


class TutorRatingSummary(BaseModel):
    tutor_id: str
    total_reviews: int
    average_rating: float
    average_teaching_quality: Optional[float] = None
    average_communication: Optional[float] = None
    average_punctuality: Optional[float] = None
    average_preparation: Optional[float] = None
    recommend_percentage: Optional[float] = None
