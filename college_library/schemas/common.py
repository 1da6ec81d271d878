"""Common Pydantic schemas."""
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(from_attributes=True)


class RecordSchema(BaseModel):
    """Immutable stored record; changes go through ``model_copy(update=...)``."""

    model_config = ConfigDict(from_attributes=True, frozen=True)


class PatchSchema(BaseModel):
    """Partial update payload that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str
    error_code: Optional[str] = None
    details: dict = {}
