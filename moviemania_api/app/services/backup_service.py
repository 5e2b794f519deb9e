"""
Backups of the stored collections.

``export`` returns one collection as a downloadable JSON document (or
the notification log as text).  With the JSON file backend the file is
returned byte for byte, so even a file that no longer parses can be
rescued.  ``export_zip`` bundles every export into one archive.
"""

import io
import json
import zipfile
from pathlib import Path
from typing import Tuple

from ..core import db
from ..core.errors import NotFound, StoreError
from ..core.store import JsonFileStore


COLLECTION_KINDS = (db.MOVIES, db.SERIES, db.ADMINS, db.SESSIONS)
NOTIFICATIONS = "notifications"
BACKUP_KINDS = COLLECTION_KINDS + (NOTIFICATIONS,)


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise StoreError(f"Cannot read {path}: {exc}") from exc


class BackupService:
    """Produces backup downloads."""

    @classmethod
    def export(cls, kind: str) -> Tuple[str, bytes, str]:
        """Return ``(filename, content, media_type)`` for one backup kind."""
        if kind == NOTIFICATIONS:
            path = db.get_notifications_path()
            content = _read_bytes(path) if path.exists() else b""
            return "notifications.log", content, "text/plain"
        if kind not in COLLECTION_KINDS:
            raise NotFound(f"Unknown backup type {kind!r}")
        store = db.get_store()
        if isinstance(store, JsonFileStore) and store.path_for(kind).exists():
            content = _read_bytes(store.path_for(kind))
        else:
            data = store.load(kind, db.DEFAULTS[kind])
            content = (json.dumps(data, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
        return f"{kind}.json", content, "application/json"

    @classmethod
    def export_zip(cls) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for kind in BACKUP_KINDS:
                filename, content, _ = cls.export(kind)
                archive.writestr(filename, content)
        return buffer.getvalue()
