"""
Service layer for statistics.

Provides the dashboard overview: how many movies, series and admins
exist and how many logins happened recently.
"""

from __future__ import annotations

from typing import Dict, Optional

from ..core import db
from ..core.config import settings
from .session_service import SessionService


class StatisticsService:
    """Aggregated counts for the admin dashboard."""

    @classmethod
    async def overview(cls, now: Optional[int] = None) -> Dict[str, int]:
        """Return catalog and account counts plus recent logins.

        "Recent" covers the last ``settings.recent_login_days`` days.
        """
        return {
            "totalMovies": len(db.load(db.MOVIES)),
            "totalSeries": len(db.load(db.SERIES)),
            "totalAdmins": len(db.load(db.ADMINS)),
            "recentLogins": await SessionService.count_recent(settings.recent_login_days, now=now),
        }
