"""
Pydantic models for series.

Series are identified by a slug.  In the JSON file backend the slug is
the mapping key and is not repeated inside the record; API responses
always include it as ``id``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SeriesBase(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = Field(..., json_schema_extra={"example": "Hell's Paradise"})
    description: str = ""
    episodes: Any = Field(..., description="Seasons/episodes structure, stored as sent")
    addedBy: str = "unknown"

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("addedBy", mode="before")
    @classmethod
    def default_added_by(cls, value: Any) -> Any:
        return value or "unknown"

    @field_validator("episodes")
    @classmethod
    def episodes_present(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("episodes are required")
        return value


class SeriesCreate(SeriesBase):
    """Schema for a new series; the slug is passed separately."""
