"""
Backup download endpoints.

``/api/backup/zip`` bundles everything; ``/api/backup/{kind}`` returns a
single collection (``movies``, ``series``, ``admins``, ``sessions``) or
the notification log (``notifications``).  Browsers fetch these through
plain links, which is why the token is also accepted as ``?token=``.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from moviemania_api.app.core.security import get_current_admin
from moviemania_api.app.services.backup_service import BackupService


router = APIRouter()


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/api/backup/zip")
async def download_zip(current_admin: dict = Depends(get_current_admin)) -> Response:
    content = BackupService.export_zip()
    return Response(content=content, media_type="application/zip", headers=_attachment("moviemania-backup.zip"))


@router.get("/api/backup/{kind}")
async def download_backup(kind: str, current_admin: dict = Depends(get_current_admin)) -> Response:
    filename, content, media_type = BackupService.export(kind)
    return Response(content=content, media_type=media_type, headers=_attachment(filename))
