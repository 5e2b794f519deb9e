"""
Series endpoints.

Series are addressed by slug.  The create route accepts the admin
panel's nested body ``{"<slug>": {"title": ..., "episodes": ...}}`` as
well as a flat record with an optional ``id``.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status

from moviemania_api.app.api.deps import acting_username, requesting_user
from moviemania_api.app.core.security import get_current_admin
from moviemania_api.app.schemas.catalog import DeleteRequest
from moviemania_api.app.schemas.validation import parse_payload
from moviemania_api.app.services.series_service import SeriesService


router = APIRouter()


@router.get("/api/series", response_model=List[Dict[str, Any]])
async def list_series() -> List[Dict[str, Any]]:
    return await SeriesService.list_series()


@router.get("/api/series/{slug}", response_model=Dict[str, Any])
async def get_series(slug: str) -> Dict[str, Any]:
    """Retrieve a single series by slug, 404 if unknown."""
    return await SeriesService.get_series(slug)


@router.post("/api/series", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def add_series(
    body: Any = Body(...),
    current_admin: dict = Depends(get_current_admin),
) -> Dict[str, Any]:
    """Add a series.

    ``title`` and ``episodes`` are required; ``description`` defaults
    to an empty string and ``addedBy`` to ``"unknown"``.  Responds 409
    when the slug is taken.
    """
    slug, record = SeriesService.split_payload(body)
    return await SeriesService.add_series(slug, record, actor=acting_username(current_admin))


@router.delete("/api/delete/series")
async def delete_series(
    body: Any = Body(...),
    current_admin: dict = Depends(get_current_admin),
) -> Dict[str, Any]:
    """Delete a series by slug (owners only)."""
    request = parse_payload(DeleteRequest, body)
    user = requesting_user(request.deletedBy, current_admin)
    deleted = await SeriesService.delete_series(request.id, user)
    message = f"Series '{request.id}' deleted." if deleted else f"Series '{request.id}' not found."
    return {"success": True, "deleted": deleted, "message": message}
