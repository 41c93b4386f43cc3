"""Activity alert feed API routes."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_user_id
from app.db.session import get_db
from app.schemas.alerts import (
    ActivityAlertListResponse,
    ActivityAlertRead,
    UnreadCountResponse,
)
from app.services.activity_alerts import (
    count_unread,
    delete_alert,
    list_alerts,
    mark_alert_read,
    mark_all_read,
)

router = APIRouter()


@router.get("", response_model=ActivityAlertListResponse)
def api_list_alerts(
    db: Session = Depends(get_db),
    user_id: UUID = Depends(require_user_id),
) -> ActivityAlertListResponse:
    """List the current user's alerts, newest first."""
    alerts = list_alerts(db, user_id)
    return ActivityAlertListResponse(
        items=[ActivityAlertRead.model_validate(a) for a in alerts],
        unread_count=sum(1 for a in alerts if not a.is_read),
    )


@router.get("/unread_count", response_model=UnreadCountResponse)
def api_unread_count(
    db: Session = Depends(get_db),
    user_id: UUID = Depends(require_user_id),
) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=count_unread(db, user_id))


@router.post("/read_all")
def api_mark_all_read(
    db: Session = Depends(get_db),
    user_id: UUID = Depends(require_user_id),
) -> dict:
    """Mark every unread alert read."""
    return {"updated": mark_all_read(db, user_id)}


@router.post("/{alert_id}/read", status_code=204)
def api_mark_alert_read(
    alert_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(require_user_id),
) -> None:
    if not mark_alert_read(db, user_id, alert_id):
        raise HTTPException(status_code=404, detail="Alert not found")


@router.delete("/{alert_id}", status_code=204)
def api_delete_alert(
    alert_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(require_user_id),
) -> None:
    if not delete_alert(db, user_id, alert_id):
        raise HTTPException(status_code=404, detail="Alert not found")
