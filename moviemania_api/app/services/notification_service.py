"""
Notification log for admin-visible events.

Every successful change to the catalog or to admin accounts appends one
line of the form ``[2024-05-01T12:30:00.123Z] Movie added: Inception``
to a plain text file.  The admin panel lists the entries and deletes
selected ones by their timestamp (milliseconds since the epoch).

Lines that do not match the ``[instant] message`` shape are skipped
when listing and always kept when deleting, so a hand-edited or
partially written log never loses data through the API.  Deleting
rewrites the whole file; that is fine for the volume an admin panel
produces.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from ..core.db import get_notifications_path
from ..core.errors import StoreError
from ..core.timeutil import format_instant, parse_instant, to_millis, utcnow


logger = logging.getLogger(__name__)

LINE_PATTERN = re.compile(r"^\[(.*?)\]\s(.+)$")
TIMESTAMP_PATTERN = re.compile(r"^\[(.*?)\]")


class NotificationLog:
    """Append-only text log stored at ``path``.

    ``clock`` returns the current UTC datetime and is replaceable for
    tests.
    """

    def __init__(self, path: Path, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.path = Path(path)
        self.clock = clock or utcnow

    def append(self, message: str) -> Dict[str, Any]:
        """Append ``message`` and return the entry as it will be listed."""
        moment = self.clock()
        text = " ".join(str(message).splitlines()).strip()
        line = f"[{format_instant(moment)}] {text}\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(line)
        except OSError as exc:
            raise StoreError(f"Cannot append to {self.path}: {exc}") from exc
        return {"timestamp": to_millis(moment), "message": text}

    def entries(self) -> Iterator[Dict[str, Any]]:
        """Yield ``{"timestamp", "message"}`` for each well-formed line."""
        if not self.path.exists():
            return
        try:
            with self.path.open(encoding="utf-8") as fh:
                for lineno, raw in enumerate(fh, start=1):
                    line = raw.rstrip("\r\n")
                    if not line.strip():
                        continue
                    match = LINE_PATTERN.match(line)
                    timestamp = parse_instant(match.group(1)) if match else None
                    if timestamp is None:
                        logger.warning("Skipping malformed line %d in %s", lineno, self.path)
                        continue
                    yield {"timestamp": timestamp, "message": match.group(2)}
        except OSError as exc:
            raise StoreError(f"Cannot read {self.path}: {exc}") from exc

    def delete_by_timestamps(self, timestamps: Iterable[int]) -> int:
        """Drop every line whose timestamp is in ``timestamps``.

        Lines without a parsable timestamp are kept.  Returns the number
        of removed lines.
        """
        wanted = {int(ts) for ts in timestamps}
        if not wanted or not self.path.exists():
            return 0
        try:
            lines = self.path.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise StoreError(f"Cannot read {self.path}: {exc}") from exc
        kept: List[str] = []
        removed = 0
        for line in lines:
            if not line.strip():
                continue
            match = TIMESTAMP_PATTERN.match(line)
            timestamp = parse_instant(match.group(1)) if match else None
            if timestamp is not None and timestamp in wanted:
                removed += 1
                continue
            kept.append(line)
        try:
            self.path.write_text("".join(f"{line}\n" for line in kept), encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Cannot rewrite {self.path}: {exc}") from exc
        return removed


class NotificationService:
    """Service wrapper around the configured notification log."""

    @classmethod
    def get_log(cls) -> NotificationLog:
        return NotificationLog(get_notifications_path())

    @classmethod
    async def log(cls, message: str) -> None:
        """Record an event.

        Called after a change has already been saved, so a failure to
        write the log is reported but does not fail the request.
        """
        try:
            cls.get_log().append(message)
        except StoreError:
            logger.exception("Could not record notification %r", message)

    @classmethod
    async def list_entries(cls) -> List[Dict[str, Any]]:
        return list(cls.get_log().entries())

    @classmethod
    async def delete_entries(cls, timestamps: Iterable[int]) -> int:
        removed = cls.get_log().delete_by_timestamps(timestamps)
        logger.info("Deleted %d notification(s)", removed)
        return removed


def by_actor(actor: Optional[str]) -> str:
    """Suffix naming who performed an action, empty when unknown."""
    return f" (by {actor})" if actor else ""
