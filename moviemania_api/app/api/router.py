"""
Top-level router.

Aggregates the entity routers.  When new endpoints are added, include
their routers here.
"""

from fastapi import APIRouter

from .endpoints import (
    admins,
    auth,
    backups,
    movies,
    notifications,
    series,
    statistics,
    uploads,
)


router = APIRouter()

router.include_router(movies.router, tags=["movies"])
router.include_router(series.router, tags=["series"])
router.include_router(auth.router, tags=["auth"])
router.include_router(admins.router, tags=["admins"])
router.include_router(notifications.router, tags=["notifications"])
router.include_router(statistics.router, tags=["statistics"])
router.include_router(backups.router, tags=["backups"])
router.include_router(uploads.router, tags=["uploads"])


@router.get("/health", tags=["health"])
async def health() -> dict:
    return {"status": "ok"}
