"""Consultation and assistance request schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CancelRequest(BaseModel):
    """Schema for cancelling a consultation or assistance request."""

    reason: str = Field(..., min_length=1, max_length=1000)


class CancelledRequestRead(BaseModel):
    """Schema for a request after cancellation (response)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: str
    cancel_reason: str | None = None
    cancelled_by: UUID | None = None
    cancelled_at: datetime | None = None
