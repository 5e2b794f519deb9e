"""
Admin account and session endpoints.

Every route requires a bearer token.  Responses never include password
hashes.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status

from moviemania_api.app.api.deps import acting_username
from moviemania_api.app.core.security import get_current_admin
from moviemania_api.app.schemas.admin import AdminCreate, AdminRead, AdminUpdate, SessionRead
from moviemania_api.app.schemas.validation import parse_payload
from moviemania_api.app.services.admin_service import AdminService
from moviemania_api.app.services.session_service import SessionService


router = APIRouter()


@router.get("/api/admins", response_model=List[AdminRead])
async def list_admins(current_admin: dict = Depends(get_current_admin)) -> List[AdminRead]:
    return await AdminService.list_admins()


@router.post("/api/admins", status_code=status.HTTP_201_CREATED)
async def create_admin(
    body: Any = Body(...),
    current_admin: dict = Depends(get_current_admin),
) -> Dict[str, Any]:
    """Create an admin account.

    Requires ``username`` and ``password``; ``role`` defaults to
    ``admin``.  Responds 409 when the username exists.
    """
    data = parse_payload(AdminCreate, body)
    admin = await AdminService.create_admin(data, actor=acting_username(current_admin))
    return {"success": True, "admin": admin.model_dump()}


@router.put("/api/admins/{username}")
async def update_admin(
    username: str,
    body: Any = Body(...),
    current_admin: dict = Depends(get_current_admin),
) -> Dict[str, Any]:
    """Update username, role and/or password of an admin.

    Other fields in the body are ignored; ``createdAt`` never changes.
    """
    data = parse_payload(AdminUpdate, body)
    admin = await AdminService.update_admin(username, data, actor=acting_username(current_admin))
    return {"success": True, "admin": admin.model_dump()}


@router.delete("/api/admins/{username}")
async def delete_admin(
    username: str,
    current_admin: dict = Depends(get_current_admin),
) -> Dict[str, Any]:
    """Delete an admin; unknown usernames succeed with ``deleted: false``."""
    deleted = await AdminService.delete_admin(username, actor=acting_username(current_admin))
    return {"success": True, "deleted": deleted}


@router.get("/api/sessions", response_model=List[SessionRead])
async def list_sessions(current_admin: dict = Depends(get_current_admin)) -> List[Dict[str, Any]]:
    return await SessionService.list_sessions()
