"""Strict schema baselines with forbidden extras by default."""

from pydantic import BaseModel, ConfigDict


class StrictRequestModel(BaseModel):
    """Request DTO base that always forbids unexpected fields."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class StandardizedModel(BaseModel):
    """Response DTO base: built from ORM rows, enums rendered as their values."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True, populate_by_name=True)
