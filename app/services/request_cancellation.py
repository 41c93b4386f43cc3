"""Manual cancellation of consultations and assistance requests by a party."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.models import Consultation, Lawyer, LegalAssistanceRequest
from app.models.request_status import CANCELLED, TERMINAL_STATUSES
from app.services.activity_alerts import (
    ALERT_TYPE_ASSISTANCE_CANCELLED,
    ALERT_TYPE_CONSULTATION_CANCELLED,
    try_create_alert,
)

logger = logging.getLogger(__name__)


class RequestNotCancellableError(ValueError):
    """Raised when the request is already expired, completed or cancelled."""

    pass


class RequestCancellationForbiddenError(PermissionError):
    """Raised when the user is neither the client nor the request's lawyer."""

    pass


@dataclass(frozen=True)
class _CancellableKind:
    model: type
    alert_type: str
    title: str
    message: str


_CONSULTATION = _CancellableKind(
    model=Consultation,
    alert_type=ALERT_TYPE_CONSULTATION_CANCELLED,
    title="Konsultasi Dibatalkan",
    message="Permintaan konsultasi telah dibatalkan oleh pihak lain.",
)

_ASSISTANCE = _CancellableKind(
    model=LegalAssistanceRequest,
    alert_type=ALERT_TYPE_ASSISTANCE_CANCELLED,
    title="Pendampingan Dibatalkan",
    message="Permintaan pendampingan telah dibatalkan oleh pihak lain.",
)


def cancel_consultation(
    db: Session, consultation_id: UUID, user_id: UUID, reason: str
) -> Consultation | None:
    """Cancel a consultation on behalf of one of its parties.

    Returns None if the consultation does not exist (caller returns 404).
    Raises RequestCancellationForbiddenError (403) or RequestNotCancellableError (409).
    """
    return _cancel(db, _CONSULTATION, consultation_id, user_id, reason)


def cancel_assistance(
    db: Session, request_id: UUID, user_id: UUID, reason: str
) -> LegalAssistanceRequest | None:
    """Cancel a legal assistance request on behalf of one of its parties.

    Same contract as cancel_consultation.
    """
    return _cancel(db, _ASSISTANCE, request_id, user_id, reason)


def _cancel(db: Session, kind: _CancellableKind, request_id: UUID, user_id: UUID, reason: str):
    model = kind.model
    request = db.get(model, request_id)
    if request is None:
        return None

    lawyer_user_id = db.scalar(select(Lawyer.user_id).where(Lawyer.id == request.lawyer_id))
    if user_id != request.client_id and user_id != lawyer_user_id:
        raise RequestCancellationForbiddenError("Only a party to the request may cancel it")

    # Guarded in the statement itself so a concurrent sweep cannot be overwritten.
    cancelled = db.execute(
        update(model)
        .where(model.id == request_id, model.status.not_in(sorted(TERMINAL_STATUSES)))
        .values(
            status=CANCELLED,
            cancel_reason=reason,
            cancelled_by=user_id,
            cancelled_at=datetime.now(timezone.utc),
        )
        .returning(model.id)
        .execution_options(synchronize_session="fetch")
    ).all()
    if not cancelled:
        db.rollback()
        raise RequestNotCancellableError(f"Request is already {request.status}")
    db.commit()
    db.refresh(request)
    logger.info("Request cancelled: %s id=%s by=%s", model.__tablename__, request_id, user_id)

    other_party = lawyer_user_id if user_id == request.client_id else request.client_id
    if other_party is not None:
        try_create_alert(db, other_party, kind.alert_type, kind.title, kind.message, request.id)
    return request
