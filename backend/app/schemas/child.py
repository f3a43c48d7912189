"""Child profile schemas."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from ..core.constants import MAX_NOTE_LENGTH
from ._strict_base import StrictModel, StrictRequestModel


class AcademicLevel(BaseModel):
    current_level: Optional[str] = None
    target_level: Optional[str] = None


class ChildBase(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=25)
    school_year: Optional[str] = Field(None, max_length=50)
    special_needs: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    subjects_of_interest: List[str] = Field(default_factory=list)
    learning_style: Optional[str] = Field(None, max_length=50)
    academic_levels: Dict[str, AcademicLevel] = Field(default_factory=dict)
    notes: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)


class ChildCreate(ChildBase):
    pass


class ChildUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=25)
    school_year: Optional[str] = Field(None, max_length=50)
    special_needs: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    subjects_of_interest: Optional[List[str]] = None
    learning_style: Optional[str] = Field(None, max_length=50)
    academic_levels: Optional[Dict[str, AcademicLevel]] = None
    notes: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)

    @field_validator("name", "subjects_of_interest", "academic_levels", mode="before")
    @classmethod
    def _reject_null(cls, v: object, info: ValidationInfo) -> object:
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class ChildResponse(StrictModel):
    id: str
    parent_id: str
    name: str
    age: Optional[int] = None
    school_year: Optional[str] = None
    special_needs: Optional[str] = None
    subjects_of_interest: List[str] = Field(default_factory=list)
    learning_style: Optional[str] = None
    academic_levels: Dict[str, AcademicLevel] = Field(default_factory=dict)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
