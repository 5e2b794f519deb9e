"""
Business logic for movies.

Movies are listed newest first: ``add_movie`` puts a new movie in
front of every existing one.
Movie ids are unique.  Deleting requires the requesting admin to have
the ``owner`` role, looked up fresh from the admin directory.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core import db
from ..core.errors import Conflict, DuplicateRecord, Forbidden, InvalidInput, NotFound
from ..schemas.movie import MovieRecord
from ..schemas.validation import parse_payload
from .admin_service import OWNER_ROLE, AdminService
from .notification_service import NotificationService, by_actor


logger = logging.getLogger(__name__)


class MovieService:
    """Service for the movie catalog."""

    @classmethod
    async def list_movies(cls) -> List[Dict[str, Any]]:
        return db.load(db.MOVIES)

    @classmethod
    async def get_movie(cls, movie_id: str) -> Dict[str, Any]:
        movie = db.get(db.MOVIES, movie_id)
        if movie is None:
            raise NotFound("Movie not found")
        return movie

    @classmethod
    async def add_movie(cls, data: Any, actor: Optional[str] = None) -> Dict[str, Any]:
        """Validate and prepend a new movie.

        Raises ``InvalidInput`` without ``id``/``title`` and
        ``Conflict`` when the id is taken.
        """
        movie = parse_payload(MovieRecord, data)
        record = {**data, "id": movie.id, "title": movie.title}
        try:
            db.insert(db.MOVIES, movie.id, record)
        except DuplicateRecord:
            raise Conflict(f"Movie ID {movie.id} already exists.") from None
        logger.info("Movie %s added", movie.id)
        await NotificationService.log(f"Movie added: {movie.title}{by_actor(actor)}")
        return record

    @classmethod
    async def update_movie(cls, movie_id: str, fields: Any, actor: Optional[str] = None) -> Dict[str, Any]:
        """Merge ``fields`` into the movie; unspecified fields are kept.

        The id of a movie cannot be changed.
        """
        if not isinstance(fields, dict):
            raise InvalidInput("Request body must be a JSON object.")
        changes = {key: value for key, value in fields.items() if key not in {"id", "_id"}}
        current = db.get(db.MOVIES, movie_id)
        if current is None:
            raise NotFound("Movie not found.")
        merged = {**current, **changes}
        parse_payload(MovieRecord, merged)
        if not db.update(db.MOVIES, movie_id, changes):
            raise NotFound("Movie not found.")
        logger.info("Movie %s updated (%s)", movie_id, ", ".join(sorted(changes)) or "no changes")
        await NotificationService.log(f"Post updated: {movie_id}{by_actor(actor)}")
        return merged

    @classmethod
    async def delete_movie(cls, movie_id: str, requesting_user: Optional[str]) -> bool:
        """Delete a movie on behalf of an owner.

        Raises ``Forbidden`` before touching the catalog when the
        requesting user is not an owner.  Returns ``False`` when there
        was nothing to delete.
        """
        if await AdminService.get_role(requesting_user) != OWNER_ROLE:
            raise Forbidden("Only owners can delete movies.")
        if not db.delete(db.MOVIES, movie_id):
            return False
        logger.info("Movie %s deleted by %s", movie_id, requesting_user)
        await NotificationService.log(f"Movie deleted: {movie_id}{by_actor(requesting_user)}")
        return True
