"""
Security helpers for password hashing and bearer-token authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC-SHA256 signatures and base64url encoding.  Tokens embed the
admin identity (``username`` and ``role``), the issue time and an
expiration timestamp (``exp``).  The secret key comes from the
application settings.  Passwords are hashed with PBKDF2-HMAC-SHA256
using a random per-password salt and verified with a constant-time
comparison.

Protected routes depend on ``get_current_admin``, which accepts the
token either from an ``Authorization: Bearer <token>`` header or from a
``?token=`` query parameter (used by download links).  A missing token
yields 401; a malformed, tampered or expired token yields 403.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import secrets
import time
from typing import Any, Dict, Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .errors import Forbidden, Unauthenticated


logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 100_000


def ensure_secret_key() -> str:
    """Return the signing secret, generating a per-process one if unset.

    Tokens signed with a generated secret stop validating when the
    process restarts, which is why a warning is logged.
    """
    if not settings.secret_key:
        settings.secret_key = secrets.token_urlsafe(32)
        logger.warning(
            "SECRET_KEY is not set; using a random per-process secret. "
            "Issued tokens will not survive a restart."
        )
    return settings.secret_key


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC-SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
    """Create a signed token with the given claims.

    The claims are extended with ``iat``, ``exp`` (UNIX timestamps) and
    a random ``jti`` so that two logins within the same second still
    produce distinct tokens.  The token has the form
    ``header.payload.signature`` with each part base64url encoded.

    Parameters
    ----------
    data : dict
        Claims to embed, e.g. ``{"username": "alice", "role": "owner"}``.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.

    Returns
    -------
    str
        A signed token.
    """
    to_encode = data.copy()
    now = int(time.time())
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["iat"] = now
    to_encode["exp"] = now + exp_seconds
    to_encode["jti"] = secrets.token_hex(8)
    header = {"alg": settings.algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature = _sign(signing_input, ensure_secret_key())
    return f"{header_b64}.{payload_b64}.{_b64_url_encode(signature)}"


def decode_access_token(token: str, now: Optional[float] = None) -> Optional[Dict[str, Any]]:
    """Verify and decode a token.

    Returns the claims when the signature matches and ``exp`` lies in
    the future relative to ``now`` (defaults to the current time);
    otherwise returns ``None``.
    """
    try:
        parts = token.split(".")
        if len(parts) != 3:
            return None
        header_b64, payload_b64, signature_b64 = parts
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, ensure_secret_key())
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        # binascii.Error and json.JSONDecodeError are both ValueErrors
        return None
    if not isinstance(data, dict) or data.get("exp") is None:
        return None
    current = time.time() if now is None else now
    try:
        if int(data["exp"]) <= current:
            return None
    except (TypeError, ValueError):
        return None
    return data


def verify_token(token: Optional[str]) -> Dict[str, Any]:
    """Resolve a raw token to the identity it carries.

    Raises ``Unauthenticated`` when no token was supplied and
    ``Forbidden`` when it does not verify.
    """
    if not token:
        raise Unauthenticated()
    payload = decode_access_token(token)
    if not payload or not payload.get("username"):
        raise Forbidden("Invalid or expired token")
    return payload


security = HTTPBearer(auto_error=False)


def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token: Optional[str] = Query(None, description="Bearer token, for clients that cannot set headers"),
) -> Dict[str, Any]:
    """Dependency returning the verified identity of the caller.

    The ``Authorization`` header wins over the query parameter.
    """
    raw = credentials.credentials if credentials is not None else token
    return verify_token(raw)


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    A 16-byte random salt is generated for each password.  The result
    holds the salt and the derived key in hex separated by ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored ``salt$hash`` string.

    Malformed stored values never verify.
    """
    if not isinstance(hashed_password, str) or "$" not in hashed_password:
        return False
    salt_hex, hash_hex = hashed_password.split("$", 1)
    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
