"""Request bodies shared by the movie and series routes."""

from typing import Optional

from pydantic import BaseModel, field_validator


class DeleteRequest(BaseModel):
    """Body of ``DELETE /api/delete/movie`` and ``DELETE /api/delete/series``."""

    id: str
    deletedBy: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_numeric_id(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
