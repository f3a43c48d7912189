"""Tutor directory schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ._strict_base import StrictModel, StrictRequestModel
from .base import Money


class TutorProfileUpsert(StrictRequestModel):
    bio: Optional[str] = Field(None, max_length=5000)
    subjects: List[str] = Field(default_factory=list)
    levels: List[str] = Field(default_factory=list)
    location: Optional[str] = Field(None, max_length=120)
    hourly_rate: Optional[Money] = None
    years_experience: int = Field(0, ge=0, le=80)
    is_active: bool = True


class TutorSummary(StrictModel):
    user_id: str
    full_name: Optional[str] = None
    bio: Optional[str] = None
    subjects: List[str] = Field(default_factory=list)
    levels: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    hourly_rate: Optional[Money] = None
    years_experience: int = 0
    is_active: bool = True
    average_rating: Optional[float] = None
    dbs_verified: bool = False
    updated_at: Optional[datetime] = None
