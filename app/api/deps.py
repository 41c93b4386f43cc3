"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

import logging
import secrets
from uuid import UUID

from fastapi import Header, HTTPException, status

from app.config import get_settings
from app.db.session import get_db  # re-export
from app.services.auth import get_user_id_from_token

logger = logging.getLogger(__name__)

__all__ = [
    "get_db",
    "get_current_user_id",
    "require_internal_token",
    "require_user_id",
]


def require_internal_token(x_internal_token: str = Header(...)) -> None:
    """Validate the internal job token from the request header.

    Uses constant-time comparison to prevent timing attacks.
    Raises 403 if the token is empty or does not match the configured value.
    """
    expected = get_settings().internal_job_token
    if not expected or not secrets.compare_digest(x_internal_token, expected):
        logger.warning("Internal endpoint auth failed: invalid or missing token")
        raise HTTPException(status_code=403, detail="Invalid internal token")


def get_current_user_id(authorization: str | None = Header(None)) -> UUID | None:
    """Return the authenticated user's id from ``Authorization: Bearer <token>``, or None."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return get_user_id_from_token(authorization[len("Bearer ") :])


def require_user_id(authorization: str | None = Header(None)) -> UUID:
    """Dependency that requires a valid bearer token; returns 401 otherwise."""
    user_id = get_current_user_id(authorization)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user_id
