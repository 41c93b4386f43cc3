"""Consultation and assistance request API routes (cancellation)."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_user_id
from app.db.session import get_db
from app.schemas.requests import CancelledRequestRead, CancelRequest
from app.services.request_cancellation import (
    RequestCancellationForbiddenError,
    RequestNotCancellableError,
    cancel_assistance,
    cancel_consultation,
)

router = APIRouter()


def _cancel_or_raise(cancel, db: Session, request_id: UUID, user_id: UUID, reason: str):
    try:
        result = cancel(db, request_id, user_id, reason)
    except RequestCancellationForbiddenError:
        raise HTTPException(status_code=403, detail="Not a party to this request")
    except RequestNotCancellableError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    if result is None:
        raise HTTPException(status_code=404, detail="Request not found")
    return CancelledRequestRead.model_validate(result)


@router.post("/consultations/{consultation_id}/cancel", response_model=CancelledRequestRead)
def api_cancel_consultation(
    consultation_id: UUID,
    data: CancelRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(require_user_id),
) -> CancelledRequestRead:
    """Cancel a consultation the current user is a party to."""
    return _cancel_or_raise(cancel_consultation, db, consultation_id, user_id, data.reason)


@router.post("/assistance/{request_id}/cancel", response_model=CancelledRequestRead)
def api_cancel_assistance(
    request_id: UUID,
    data: CancelRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(require_user_id),
) -> CancelledRequestRead:
    """Cancel a legal assistance request the current user is a party to."""
    return _cancel_or_raise(cancel_assistance, db, request_id, user_id, data.reason)
