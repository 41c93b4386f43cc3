"""Pydantic schemas for request/response validation."""

from app.schemas.alerts import (
    ActivityAlertListResponse,
    ActivityAlertRead,
    UnreadCountResponse,
)
from app.schemas.requests import CancelledRequestRead, CancelRequest

__all__ = [
    # Alerts
    "ActivityAlertRead",
    "ActivityAlertListResponse",
    "UnreadCountResponse",
    # Requests
    "CancelRequest",
    "CancelledRequestRead",
]
