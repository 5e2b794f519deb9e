"""
Movie endpoints.

Listing and fetching are public.  Adding, updating and deleting
require a bearer token; deleting additionally requires the ``owner``
role.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status

from moviemania_api.app.api.deps import acting_username, requesting_user
from moviemania_api.app.core.security import get_current_admin
from moviemania_api.app.schemas.catalog import DeleteRequest
from moviemania_api.app.schemas.validation import parse_payload
from moviemania_api.app.services.movie_service import MovieService


router = APIRouter()


@router.get("/api/movies", response_model=List[Dict[str, Any]])
async def list_movies() -> List[Dict[str, Any]]:
    """Return all movies, newest first."""
    return await MovieService.list_movies()


@router.get("/api/movies/{movie_id}", response_model=Dict[str, Any])
async def get_movie(movie_id: str) -> Dict[str, Any]:
    return await MovieService.get_movie(movie_id)


@router.post("/api/movies", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def add_movie(
    body: Any = Body(...),
    current_admin: dict = Depends(get_current_admin),
) -> Dict[str, Any]:
    """Add a movie.

    The body needs at least ``id`` and ``title``; other fields are
    stored as sent.  Responds 409 when the id already exists.
    """
    return await MovieService.add_movie(body, actor=acting_username(current_admin))


@router.put("/update/movie/{movie_id}", response_model=Dict[str, Any])
async def update_movie(
    movie_id: str,
    body: Any = Body(...),
    current_admin: dict = Depends(get_current_admin),
) -> Dict[str, Any]:
    """Partially update a movie; fields not in the body are kept."""
    return await MovieService.update_movie(movie_id, body, actor=acting_username(current_admin))


@router.delete("/api/delete/movie")
async def delete_movie(
    body: Any = Body(...),
    current_admin: dict = Depends(get_current_admin),
) -> Dict[str, Any]:
    """Delete a movie by id (owners only).

    Deleting an id that does not exist succeeds with ``deleted: false``.
    """
    request = parse_payload(DeleteRequest, body)
    user = requesting_user(request.deletedBy, current_admin)
    deleted = await MovieService.delete_movie(request.id, user)
    message = f"Post '{request.id}' deleted." if deleted else f"Post '{request.id}' not found."
    return {"success": True, "deleted": deleted, "message": message}
