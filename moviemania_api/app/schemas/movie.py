"""
Pydantic models for movie records.

A movie only needs an ``id`` and a ``title``; everything else the admin
panel sends (poster URL, year, genres, download links ...) is kept
verbatim as extra fields.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MovieRecord(BaseModel):
    """Schema for creating and reading a movie."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., json_schema_extra={"example": "inception-2010"})
    title: str = Field(..., json_schema_extra={"example": "Inception"})

    @field_validator("id", mode="before")
    @classmethod
    def coerce_numeric_id(cls, value: Any) -> Any:
        # Older clients post numeric ids.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("id", "title")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value
