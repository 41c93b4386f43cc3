"""Activity alert schemas for request/response validation."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ActivityAlertRead(BaseModel):
    """Schema for reading an activity alert (response)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    type: str
    title: str
    message: str
    related_id: UUID | None = None
    is_read: bool
    created_at: datetime


class ActivityAlertListResponse(BaseModel):
    """Schema for the alert feed response."""

    items: list[ActivityAlertRead]
    unread_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int
