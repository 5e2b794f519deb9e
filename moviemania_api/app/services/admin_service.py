"""
Business logic for admin accounts.

Admins are stored as a mapping of username to record
(``password`` hash, ``role``, ``createdAt`` and optionally
``lastLogin``).  Every operation reads the record store afresh, so
role checks always see the latest state.  Passwords
are stored as salted PBKDF2 hashes and never leave this module.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core import db
from ..core.errors import Conflict, DuplicateRecord, InvalidInput, NotFound
from ..core.security import hash_password, verify_password
from ..core.timeutil import format_instant, now_ms, utcnow
from ..schemas.admin import AdminCreate, AdminRead, AdminUpdate
from .notification_service import NotificationService, by_actor


logger = logging.getLogger(__name__)

OWNER_ROLE = "owner"
UNKNOWN_ROLE = "unknown"


class AdminService:
    """Service for managing admin accounts and their credentials."""

    @staticmethod
    def _public(username: str, record: Dict[str, Any]) -> AdminRead:
        return AdminRead(
            username=username,
            role=record.get("role") or UNKNOWN_ROLE,
            createdAt=record.get("createdAt"),
            lastLogin=record.get("lastLogin"),
        )

    @classmethod
    async def list_admins(cls) -> List[AdminRead]:
        admins = db.load(db.ADMINS)
        return [cls._public(username, record) for username, record in admins.items()]

    @classmethod
    async def get_admin(cls, username: str) -> AdminRead:
        record = db.get(db.ADMINS, username)
        if record is None:
            raise NotFound("User not found")
        return cls._public(username, record)

    @classmethod
    async def authenticate(cls, username: str, password: str) -> Optional[AdminRead]:
        """Return the admin when ``password`` matches, otherwise ``None``."""
        record = db.get(db.ADMINS, username)
        if record is None or not verify_password(password, record.get("password", "")):
            logger.info("Failed login for %s", username)
            return None
        return cls._public(username, record)

    @classmethod
    async def create_admin(cls, data: AdminCreate, actor: Optional[str] = None) -> AdminRead:
        """Create an admin; usernames are unique."""
        username = data.username.strip()
        if not username:
            raise InvalidInput("Username is required.")
        record = {
            "password": hash_password(data.password),
            "role": data.role,
            "createdAt": format_instant(utcnow()),
        }
        try:
            db.insert(db.ADMINS, username, record)
        except DuplicateRecord:
            raise Conflict("Username exists") from None
        logger.info("Admin %s created with role %s", username, data.role)
        await NotificationService.log(f"Admin added: {username}{by_actor(actor)}")
        return cls._public(username, record)

    @classmethod
    async def update_admin(cls, username: str, data: AdminUpdate, actor: Optional[str] = None) -> AdminRead:
        """Change role and/or password of an admin, or rename it.

        ``createdAt`` and ``lastLogin`` are never touched.  A renamed
        account keeps its position in the listing.
        """
        current = db.get(db.ADMINS, username)
        if current is None:
            raise NotFound("Not found")
        new_username = (data.username or username).strip() or username

        changes: Dict[str, Any] = {}
        if data.role is not None:
            changes["role"] = data.role
        if data.password is not None:
            changes["password"] = hash_password(data.password)
        try:
            found = db.update(db.ADMINS, username, changes, new_key=new_username)
        except DuplicateRecord:
            raise Conflict("Username exists") from None
        if not found:
            raise NotFound("Not found")
        logger.info("Admin %s updated", username)
        renamed = f" -> {new_username}" if new_username != username else ""
        await NotificationService.log(f"Admin updated: {username}{renamed}{by_actor(actor)}")
        return cls._public(new_username, {**current, **changes})

    @classmethod
    async def delete_admin(cls, username: str, actor: Optional[str] = None) -> bool:
        """Remove an admin.  Deleting an unknown username is a no-op."""
        if not db.delete(db.ADMINS, username):
            return False
        logger.info("Admin %s deleted", username)
        await NotificationService.log(f"Admin deleted: {username}{by_actor(actor)}")
        return True

    @classmethod
    async def get_role(cls, username: Optional[str]) -> str:
        """Role of ``username``, or ``"unknown"`` when there is no such admin."""
        if not username:
            return UNKNOWN_ROLE
        record = db.get(db.ADMINS, username)
        if record is None:
            return UNKNOWN_ROLE
        return record.get("role") or UNKNOWN_ROLE

    @classmethod
    async def record_login(cls, username: str, ip: Optional[str]) -> None:
        db.update(db.ADMINS, username, {"lastLogin": {"timestamp": now_ms(), "ip": ip}})

    @classmethod
    async def set_password(cls, username: str, password: str) -> None:
        """Replace a password without touching anything else."""
        if not password:
            raise InvalidInput("Empty password is not allowed.")
        if not db.update(db.ADMINS, username, {"password": hash_password(password)}):
            raise NotFound(f"No admin named {username}")
        logger.info("Password reset for %s", username)

    @classmethod
    async def ensure_owner(cls, username: str, password: str) -> bool:
        """Create an owner account when the directory is empty.

        Returns ``True`` when an account was created.
        """
        if not username or not password:
            return False
        if db.load(db.ADMINS):
            return False
        await cls.create_admin(AdminCreate(username=username, password=password, role=OWNER_ROLE), actor="bootstrap")
        return True
