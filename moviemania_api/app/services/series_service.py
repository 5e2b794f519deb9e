"""
Business logic for series.

Series are stored as a mapping of slug to record.  Creating a series
whose slug already exists is rejected with ``Conflict`` for every
storage backend; existing data is never merged or overwritten by a
create.  Deletion is restricted to owners, as for movies.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from ..core import db
from ..core.errors import Conflict, DuplicateRecord, Forbidden, InvalidInput, NotFound
from ..schemas.series import SeriesCreate
from ..schemas.validation import parse_payload
from .admin_service import OWNER_ROLE, AdminService
from .notification_service import NotificationService, by_actor


logger = logging.getLogger(__name__)

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """``"Hell's Paradise"`` -> ``"hell-s-paradise"``."""
    return _NON_SLUG.sub("-", title.lower()).strip("-")


class SeriesService:
    """Service for the series catalog."""

    @staticmethod
    def split_payload(body: Any) -> Tuple[str, Dict[str, Any]]:
        """Extract ``(slug, record)`` from a create request body.

        Two shapes are accepted: the admin panel's nested form
        ``{"<slug>": {...record...}}`` and a flat record with an
        optional ``id``.  A flat record without ``id`` gets a slug
        derived from its title.
        """
        if not isinstance(body, dict) or not body:
            raise InvalidInput("Missing required fields.")
        if "title" in body:
            record = {key: value for key, value in body.items() if key != "id"}
            slug = body.get("id") or slugify(str(body.get("title") or ""))
            return str(slug), record
        if len(body) == 1:
            slug, record = next(iter(body.items()))
            if isinstance(record, dict):
                return slug, {key: value for key, value in record.items() if key != "id"}
        raise InvalidInput("Missing required fields.")

    @classmethod
    async def list_series(cls) -> List[Dict[str, Any]]:
        return [{"id": slug, **record} for slug, record in db.load(db.SERIES).items()]

    @classmethod
    async def get_series(cls, slug: str) -> Dict[str, Any]:
        record = db.get(db.SERIES, slug)
        if record is None:
            raise NotFound("Series not found.")
        return {"id": slug, **record}

    @classmethod
    async def add_series(cls, slug: str, data: Any, actor: Optional[str] = None) -> Dict[str, Any]:
        """Validate and store a new series under ``slug``."""
        if not slug or not slug.strip():
            raise InvalidInput("Missing required fields.")
        series = parse_payload(SeriesCreate, data)
        record = {key: value for key, value in series.model_dump().items() if key != "id"}
        try:
            db.insert(db.SERIES, slug, record)
        except DuplicateRecord:
            raise Conflict("Series ID already exists.") from None
        logger.info("Series %s added", slug)
        await NotificationService.log(f"Series added: {series.title}{by_actor(actor)}")
        return {"id": slug, **record}

    @classmethod
    async def delete_series(cls, slug: str, requesting_user: Optional[str]) -> bool:
        """Delete a series on behalf of an owner; ``False`` if absent."""
        if await AdminService.get_role(requesting_user) != OWNER_ROLE:
            raise Forbidden("Only owners can delete series.")
        if not db.delete(db.SERIES, slug):
            return False
        logger.info("Series %s deleted by %s", slug, requesting_user)
        await NotificationService.log(f"Series deleted: {slug}{by_actor(requesting_user)}")
        return True
