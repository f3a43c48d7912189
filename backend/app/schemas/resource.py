"""Learning resource schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator

from ..core.constants import MAX_NOTE_LENGTH
from ..core.enums import ResourceType
from ._strict_base import StrictModel, StrictRequestModel


class ResourceCreate(StrictRequestModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    resource_type: ResourceType = ResourceType.DOCUMENT
    subject: Optional[str] = Field(None, max_length=100)
    grade_level: Optional[str] = Field(None, max_length=50)
    file_url: Optional[str] = Field(None, max_length=500)
    external_url: Optional[str] = Field(None, max_length=500)
    is_public: bool = False


class ResourceUpdate(StrictRequestModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)
    resource_type: Optional[ResourceType] = None
    subject: Optional[str] = Field(None, max_length=100)
    grade_level: Optional[str] = Field(None, max_length=50)
    file_url: Optional[str] = Field(None, max_length=500)
    external_url: Optional[str] = Field(None, max_length=500)
    is_public: Optional[bool] = None

    @field_validator("title", "resource_type", "is_public", mode="before")
    @classmethod
    def _reject_null(cls, v: object, info: ValidationInfo) -> object:
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class ResourceResponse(StrictModel):
    id: str
    created_by: str
    title: str
    description: Optional[str] = None
    resource_type: str
    subject: Optional[str] = None
    grade_level: Optional[str] = None
    file_url: Optional[str] = None
    external_url: Optional[str] = None
    is_public: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
