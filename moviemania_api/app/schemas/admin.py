"""
Pydantic models for admin accounts, logins and sessions.

Stored admin records carry a password hash; ``AdminRead`` is the only
shape returned by the API and has no password field.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field


class AdminCreate(BaseModel):
    username: str = Field(..., min_length=1, json_schema_extra={"example": "alice"})
    password: str = Field(..., min_length=1, json_schema_extra={"example": "correct horse"})
    role: str = Field("admin", json_schema_extra={"example": "owner"})


class AdminUpdate(BaseModel):
    """Partial update; only the fields below are recognised."""

    username: Optional[str] = Field(None, min_length=1)
    role: Optional[str] = None
    password: Optional[str] = Field(None, min_length=1)


class LastLogin(BaseModel):
    timestamp: Union[int, str]
    ip: Optional[str] = None


class AdminRead(BaseModel):
    username: str
    role: str
    createdAt: Optional[str] = None
    lastLogin: Optional[LastLogin] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class SessionRead(BaseModel):
    username: str
    token: str
    ip: Optional[str] = None
    timestamp: int
