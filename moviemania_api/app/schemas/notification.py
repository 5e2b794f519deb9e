"""Pydantic models for notification log entries and statistics."""

from typing import List

from pydantic import BaseModel, Field


class NotificationEntry(BaseModel):
    timestamp: int = Field(..., description="Milliseconds since the epoch")
    message: str


class NotificationDelete(BaseModel):
    indexes: List[int] = Field(..., description="Timestamps (ms) of the entries to delete")


class StatsRead(BaseModel):
    totalMovies: int
    totalSeries: int
    totalAdmins: int
    recentLogins: int
