"""
Login sessions.

A session is appended for every successful login and never modified
afterwards.  Sessions only feed the admin panel's session list and the
recent-logins statistic.
"""

from typing import Any, Dict, List, Optional

from ..core import db
from ..core.timeutil import now_ms


DAY_MS = 24 * 60 * 60 * 1000


class SessionService:
    """Service for the append-only session log."""

    @classmethod
    async def record(cls, username: str, token: str, ip: Optional[str]) -> Dict[str, Any]:
        session = {"username": username, "token": token, "ip": ip, "timestamp": now_ms()}
        db.insert(db.SESSIONS, token, session)
        return session

    @classmethod
    async def list_sessions(cls) -> List[Dict[str, Any]]:
        return db.load(db.SESSIONS)

    @classmethod
    async def count_recent(cls, days: int, now: Optional[int] = None) -> int:
        """Number of sessions started within the last ``days`` days."""
        cutoff = (now_ms() if now is None else now) - days * DAY_MS
        return sum(
            1
            for session in db.load(db.SESSIONS)
            if isinstance(session.get("timestamp"), (int, float)) and session["timestamp"] >= cutoff
        )
