"""
Login and profile endpoints.

A successful login issues a bearer token, appends a session record and
stamps the admin's ``lastLogin``.  The login route is served under both
``/api/admin/login`` and ``/api/login`` because both are used by
existing clients.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse

from moviemania_api.app.api.deps import client_ip
from moviemania_api.app.core.security import create_access_token, get_current_admin
from moviemania_api.app.schemas.admin import AdminRead, LoginRequest
from moviemania_api.app.schemas.validation import parse_payload
from moviemania_api.app.services.admin_service import AdminService
from moviemania_api.app.services.session_service import SessionService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/admin/login")
@router.post("/api/login")
async def login(request: Request, body: Any = Body(...)) -> Any:
    """Authenticate an admin and return a token.

    Wrong credentials produce 401 with ``{"success": false, "message":
    "Invalid credentials"}``.
    """
    credentials = parse_payload(LoginRequest, body)
    admin = await AdminService.authenticate(credentials.username, credentials.password)
    if admin is None:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"success": False, "message": "Invalid credentials"},
        )
    token = create_access_token({"username": admin.username, "role": admin.role})
    ip = client_ip(request)
    await SessionService.record(admin.username, token, ip)
    await AdminService.record_login(admin.username, ip)
    logger.info("Admin %s logged in from %s", admin.username, ip)
    return {
        "success": True,
        "token": token,
        "user": {"username": admin.username, "role": admin.role},
    }


@router.get("/api/profile", response_model=AdminRead)
async def get_profile(current_admin: dict = Depends(get_current_admin)) -> AdminRead:
    """Return the record of the admin the token belongs to."""
    return await AdminService.get_admin(current_admin["username"])
