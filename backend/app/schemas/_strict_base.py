"""Strict schema baselines: requests forbid unknown fields, responses read ORM rows."""

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Response DTO base populated from ORM objects."""

    model_config = ConfigDict(extra="forbid", from_attributes=True, use_enum_values=True)


class StrictRequestModel(BaseModel):
    """Request DTO base that always forbids unexpected fields."""

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )
