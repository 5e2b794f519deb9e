"""Dashboard statistics endpoint."""

from fastapi import APIRouter, Depends

from moviemania_api.app.core.security import get_current_admin
from moviemania_api.app.schemas.notification import StatsRead
from moviemania_api.app.services.statistics_service import StatisticsService


router = APIRouter()


@router.get("/api/stats", response_model=StatsRead)
async def get_stats(current_admin: dict = Depends(get_current_admin)) -> StatsRead:
    """Counts of movies, series and admins, plus logins in the last week."""
    return StatsRead(**await StatisticsService.overview())
