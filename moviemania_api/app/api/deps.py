"""Request-level helpers shared by endpoint modules."""

from typing import Any, Dict, Optional

from fastapi import Request

from ..core.errors import Forbidden


def acting_username(current_admin: Dict[str, Any]) -> Optional[str]:
    return current_admin.get("username")


def requesting_user(deleted_by: Optional[str], current_admin: Dict[str, Any]) -> Optional[str]:
    """Resolve who is asking for a deletion.

    Clients send ``deletedBy`` alongside the token.  It may be omitted,
    but when present it has to name the authenticated admin; otherwise
    any admin could borrow an owner's name.
    """
    username = acting_username(current_admin)
    if deleted_by and deleted_by != username:
        raise Forbidden("deletedBy does not match the authenticated admin")
    return username


def client_ip(request: Request) -> Optional[str]:
    """Source address, honouring the first ``X-Forwarded-For`` hop."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.client.host if request.client else None
