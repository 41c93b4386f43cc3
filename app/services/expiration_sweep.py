"""Auto-expiration sweep for stale pending requests.

Pending consultations older than one hour become ``expired``; pending legal
assistance requests older than one hour become ``cancelled``. Both parties get
an activity alert for every transitioned request.

Each collection is transitioned by a single ``UPDATE ... WHERE status =
'pending' AND created_at < cutoff RETURNING ...`` statement, so the predicate
check and the write happen atomically per row. A second (or concurrent) sweep
finds nothing left to match and creates no alerts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Consultation, Lawyer, LegalAssistanceRequest
from app.models.request_status import CANCELLED, EXPIRED, PENDING
from app.services.activity_alerts import (
    ALERT_TYPE_ASSISTANCE_EXPIRED,
    ALERT_TYPE_CONSULTATION_EXPIRED,
    try_create_alert,
)

logger = logging.getLogger(__name__)

EXPIRATION_WINDOW = timedelta(hours=1)
AUTO_EXPIRE_REASON = "Otomatis dibatalkan karena tidak ada respons dalam 1 jam"


class StoreUpdateError(RuntimeError):
    """The conditional update for one collection failed; the sweep is aborted."""


@dataclass(frozen=True)
class ExpirableKind:
    """How one request collection is swept and announced."""

    label: str
    model: type
    terminal_status: str
    alert_type: str
    title: str
    client_message: str
    lawyer_message: str


CONSULTATIONS = ExpirableKind(
    label="consultations",
    model=Consultation,
    terminal_status=EXPIRED,
    alert_type=ALERT_TYPE_CONSULTATION_EXPIRED,
    title="Konsultasi Dibatalkan Otomatis",
    client_message=(
        "Permintaan konsultasi Anda dibatalkan otomatis karena tidak ada respons "
        "dari pengacara dalam 1 jam."
    ),
    lawyer_message=(
        "Permintaan konsultasi telah dibatalkan otomatis karena tidak direspons dalam 1 jam."
    ),
)

ASSISTANCE_REQUESTS = ExpirableKind(
    label="assistance requests",
    model=LegalAssistanceRequest,
    terminal_status=CANCELLED,
    alert_type=ALERT_TYPE_ASSISTANCE_EXPIRED,
    title="Pendampingan Dibatalkan Otomatis",
    client_message=(
        "Permintaan pendampingan Anda dibatalkan otomatis karena tidak ada respons "
        "dari pengacara dalam 1 jam."
    ),
    lawyer_message=(
        "Permintaan pendampingan telah dibatalkan otomatis karena tidak direspons dalam 1 jam."
    ),
)


@dataclass
class SweepSummary:
    """Outcome of one sweep."""

    expired_consultations: int
    expired_assistance: int
    alerts_created: int
    alerts_failed: int
    timestamp: datetime

    def as_response(self) -> dict:
        """JSON body returned to the scheduler."""
        return {
            "success": True,
            "expiredConsultations": self.expired_consultations,
            "expiredAssistance": self.expired_assistance,
            "timestamp": self.timestamp.isoformat(),
            "alertsCreated": self.alerts_created,
            "alertsFailed": self.alerts_failed,
        }


@dataclass
class _KindResult:
    expired: int = 0
    alerts_created: int = 0
    alerts_failed: int = 0


def run_expiration_sweep(db: Session, now: datetime | None = None) -> SweepSummary:
    """Expire stale pending consultations and assistance requests.

    Args:
        db: Session on the privileged data-platform connection.
        now: Reference time (default: current UTC time).

    Returns:
        SweepSummary with per-collection counts and alert outcomes.

    Raises:
        StoreUpdateError: when either conditional update fails. Transitions
            and alerts committed before the failure stay in place.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    cutoff = now - EXPIRATION_WINDOW

    consultations = _sweep_kind(db, CONSULTATIONS, cutoff)
    assistance = _sweep_kind(db, ASSISTANCE_REQUESTS, cutoff)

    summary = SweepSummary(
        expired_consultations=consultations.expired,
        expired_assistance=assistance.expired,
        alerts_created=consultations.alerts_created + assistance.alerts_created,
        alerts_failed=consultations.alerts_failed + assistance.alerts_failed,
        timestamp=datetime.now(timezone.utc),
    )
    logger.info(
        "Auto-expire completed: consultations=%d assistance=%d alerts_created=%d alerts_failed=%d",
        summary.expired_consultations,
        summary.expired_assistance,
        summary.alerts_created,
        summary.alerts_failed,
    )
    return summary


def _expire_statement(kind: ExpirableKind, cutoff: datetime):
    """Predicate-guarded transition of every stale pending row of ``kind``."""
    model = kind.model
    return (
        update(model)
        .where(model.status == PENDING, model.created_at < cutoff)
        .values(
            status=kind.terminal_status,
            auto_expired=True,
            cancel_reason=AUTO_EXPIRE_REASON,
        )
        .returning(model.id, model.client_id, model.lawyer_id)
        .execution_options(synchronize_session="fetch")
    )


def _sweep_kind(db: Session, kind: ExpirableKind, cutoff: datetime) -> _KindResult:
    try:
        rows = db.execute(_expire_statement(kind, cutoff)).all()
        # Transition is durable before any alert is attempted.
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error expiring %s: %s", kind.label, exc)
        raise StoreUpdateError(f"Failed to expire {kind.label}: {exc}") from exc

    result = _KindResult(expired=len(rows))
    for request_id, client_id, lawyer_id in rows:
        _record(
            result,
            try_create_alert(
                db, client_id, kind.alert_type, kind.title, kind.client_message, request_id
            ),
        )

        lawyer_user_id = _lookup_lawyer_user_id(db, lawyer_id)
        if lawyer_user_id is None:
            continue
        _record(
            result,
            try_create_alert(
                db, lawyer_user_id, kind.alert_type, kind.title, kind.lawyer_message, request_id
            ),
        )

    if rows:
        logger.info("Expired %d %s (cutoff=%s)", len(rows), kind.label, cutoff.isoformat())
    return result


def _record(result: _KindResult, created: bool) -> None:
    if created:
        result.alerts_created += 1
    else:
        result.alerts_failed += 1


def _lookup_lawyer_user_id(db: Session, lawyer_id: UUID) -> UUID | None:
    """Owning user of a lawyer profile; None when missing or the lookup fails."""
    try:
        return db.scalar(select(Lawyer.user_id).where(Lawyer.id == lawyer_id))
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Lawyer lookup failed: lawyer_id=%s", lawyer_id, exc_info=True)
        return None
