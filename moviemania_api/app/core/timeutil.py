"""
Time helpers shared by services.

Instants travel through the API as integer milliseconds since the epoch
(session timestamps, notification timestamps) and are written to disk as
ISO-8601 strings in UTC with millisecond precision and a ``Z`` suffix,
e.g. ``2024-05-01T12:30:00.123Z``.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_millis(moment: datetime) -> int:
    """Exact integer milliseconds since the epoch; naive values are UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - EPOCH) // _ONE_MS


def now_ms() -> int:
    return to_millis(utcnow())


def format_instant(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_instant(text: str) -> Optional[int]:
    """Parse an ISO-8601 instant into epoch milliseconds, ``None`` if invalid."""
    value = text.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        return None
    return to_millis(moment)
