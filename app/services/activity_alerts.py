"""Activity alert service: write alerts and serve a user's alert feed."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import ActivityAlert

logger = logging.getLogger(__name__)

ALERT_TYPE_CONSULTATION_EXPIRED = "consultation_expired"
ALERT_TYPE_ASSISTANCE_EXPIRED = "assistance_expired"
ALERT_TYPE_CONSULTATION_CANCELLED = "consultation_cancelled"
ALERT_TYPE_ASSISTANCE_CANCELLED = "assistance_cancelled"


def create_alert(
    db: Session,
    user_id: UUID,
    alert_type: str,
    title: str,
    message: str,
    related_id: UUID | None = None,
) -> ActivityAlert:
    """Insert and commit a single alert row."""
    alert = ActivityAlert(
        user_id=user_id,
        type=alert_type,
        title=title,
        message=message,
        related_id=related_id,
    )
    db.add(alert)
    db.commit()
    return alert


def try_create_alert(
    db: Session,
    user_id: UUID,
    alert_type: str,
    title: str,
    message: str,
    related_id: UUID | None = None,
) -> bool:
    """Best-effort create_alert: on a store error, roll back, log, and return False."""
    try:
        create_alert(db, user_id, alert_type, title, message, related_id)
    except SQLAlchemyError:
        db.rollback()
        logger.warning(
            "Alert write failed: type=%s user_id=%s related_id=%s",
            alert_type,
            user_id,
            related_id,
            exc_info=True,
        )
        return False
    return True


def list_alerts(db: Session, user_id: UUID) -> list[ActivityAlert]:
    """All alerts for a user, newest first."""
    stmt = (
        select(ActivityAlert)
        .where(ActivityAlert.user_id == user_id)
        .order_by(ActivityAlert.created_at.desc())
    )
    return list(db.scalars(stmt).all())


def count_unread(db: Session, user_id: UUID) -> int:
    stmt = select(func.count(ActivityAlert.id)).where(
        ActivityAlert.user_id == user_id,
        ActivityAlert.is_read == False,  # noqa: E712
    )
    return db.scalar(stmt) or 0


def mark_alert_read(db: Session, user_id: UUID, alert_id: UUID) -> bool:
    """Mark one alert read. Returns False if it does not exist or is not the user's."""
    updated = db.execute(
        update(ActivityAlert)
        .where(ActivityAlert.id == alert_id, ActivityAlert.user_id == user_id)
        .values(is_read=True)
        .returning(ActivityAlert.id)
        .execution_options(synchronize_session="fetch")
    ).all()
    db.commit()
    return len(updated) > 0


def mark_all_read(db: Session, user_id: UUID) -> int:
    """Mark every unread alert of the user read. Returns the number updated."""
    updated = db.execute(
        update(ActivityAlert)
        .where(
            ActivityAlert.user_id == user_id,
            ActivityAlert.is_read == False,  # noqa: E712
        )
        .values(is_read=True)
        .returning(ActivityAlert.id)
        .execution_options(synchronize_session="fetch")
    ).all()
    db.commit()
    return len(updated)


def delete_alert(db: Session, user_id: UUID, alert_id: UUID) -> bool:
    """Delete one of the user's alerts. Returns False when not found."""
    deleted = db.execute(
        delete(ActivityAlert)
        .where(ActivityAlert.id == alert_id, ActivityAlert.user_id == user_id)
        .returning(ActivityAlert.id)
        .execution_options(synchronize_session="fetch")
    ).all()
    db.commit()
    return len(deleted) > 0
