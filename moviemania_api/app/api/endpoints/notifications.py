"""
Notification endpoints.

Entries are listed oldest first, as written.  Deletion takes the
``timestamp`` values of the entries to drop in ``indexes``, the name
the admin panel has always used.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from moviemania_api.app.core.security import get_current_admin
from moviemania_api.app.schemas.notification import NotificationDelete, NotificationEntry
from moviemania_api.app.schemas.validation import parse_payload
from moviemania_api.app.services.notification_service import NotificationService


router = APIRouter()


@router.get("/api/notifications", response_model=List[NotificationEntry])
async def list_notifications(current_admin: dict = Depends(get_current_admin)) -> List[Dict[str, Any]]:
    return await NotificationService.list_entries()


@router.delete("/api/notifications/delete")
async def delete_notifications(
    body: Any = Body(...),
    current_admin: dict = Depends(get_current_admin),
) -> Dict[str, Any]:
    """Delete the entries whose timestamps are listed in ``indexes``."""
    request = parse_payload(NotificationDelete, body)
    removed = await NotificationService.delete_entries(request.indexes)
    return {"success": True, "deleted": removed}
