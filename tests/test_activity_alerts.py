"""Tests for the activity alert service and feed API."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models import ActivityAlert
from app.services.activity_alerts import (
    count_unread,
    create_alert,
    delete_alert,
    list_alerts,
    mark_alert_read,
    mark_all_read,
)
from app.services.auth import create_access_token

BASE_TIME = datetime(2026, 10, 1, 8, 0, tzinfo=timezone.utc)


def _alert(db: Session, user_id: uuid.UUID, minutes: int, is_read: bool = False) -> ActivityAlert:
    alert = ActivityAlert(
        user_id=user_id,
        type="consultation_expired",
        title="Konsultasi Dibatalkan Otomatis",
        message="Permintaan konsultasi Anda dibatalkan otomatis.",
        related_id=uuid.uuid4(),
        is_read=is_read,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )
    db.add(alert)
    db.commit()
    return alert


def _auth(user_id: uuid.UUID) -> dict:
    return {"Authorization": f"Bearer {create_access_token(data={'sub': str(user_id)})}"}


class TestAlertService:
    def test_create_alert_persists(self, db: Session) -> None:
        user_id = uuid.uuid4()
        related = uuid.uuid4()
        alert = create_alert(db, user_id, "assistance_expired", "Judul", "Pesan", related)

        stored = db.get(ActivityAlert, alert.id)
        assert stored is not None
        assert stored.user_id == user_id
        assert stored.related_id == related
        assert stored.is_read is False

    def test_list_alerts_newest_first_and_scoped(self, db: Session) -> None:
        user_id = uuid.uuid4()
        older = _alert(db, user_id, 0)
        newer = _alert(db, user_id, 30)
        _alert(db, uuid.uuid4(), 60)

        alerts = list_alerts(db, user_id)

        assert [a.id for a in alerts] == [newer.id, older.id]

    def test_count_unread(self, db: Session) -> None:
        user_id = uuid.uuid4()
        _alert(db, user_id, 0)
        _alert(db, user_id, 1)
        _alert(db, user_id, 2, is_read=True)

        assert count_unread(db, user_id) == 2
        assert count_unread(db, uuid.uuid4()) == 0

    def test_mark_alert_read_only_for_owner(self, db: Session) -> None:
        owner = uuid.uuid4()
        alert = _alert(db, owner, 0)

        assert mark_alert_read(db, uuid.uuid4(), alert.id) is False
        assert mark_alert_read(db, owner, alert.id) is True
        db.refresh(alert)
        assert alert.is_read is True

    def test_mark_all_read(self, db: Session) -> None:
        user_id = uuid.uuid4()
        _alert(db, user_id, 0)
        _alert(db, user_id, 1)
        _alert(db, user_id, 2, is_read=True)

        assert mark_all_read(db, user_id) == 2
        assert count_unread(db, user_id) == 0
        assert mark_all_read(db, user_id) == 0

    def test_delete_alert(self, db: Session) -> None:
        owner = uuid.uuid4()
        alert = _alert(db, owner, 0)
        alert_id = alert.id

        assert delete_alert(db, uuid.uuid4(), alert_id) is False
        assert delete_alert(db, owner, alert_id) is True
        assert list_alerts(db, owner) == []


class TestAlertApi:
    def test_requires_bearer_token(self, client: TestClient) -> None:
        response = client.get("/api/alerts")
        assert response.status_code == 401

    def test_list_alerts(self, client_with_db: TestClient, db: Session) -> None:
        user_id = uuid.uuid4()
        _alert(db, user_id, 0)
        _alert(db, user_id, 5, is_read=True)

        response = client_with_db.get("/api/alerts", headers=_auth(user_id))

        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 2
        assert data["unread_count"] == 1
        assert data["items"][0]["is_read"] is True  # newest first

    def test_unread_count(self, client_with_db: TestClient, db: Session) -> None:
        user_id = uuid.uuid4()
        _alert(db, user_id, 0)

        response = client_with_db.get("/api/alerts/unread_count", headers=_auth(user_id))

        assert response.status_code == 200
        assert response.json() == {"unread_count": 1}

    def test_mark_read_and_read_all(self, client_with_db: TestClient, db: Session) -> None:
        user_id = uuid.uuid4()
        first = _alert(db, user_id, 0)
        _alert(db, user_id, 1)
        _alert(db, user_id, 2)

        response = client_with_db.post(f"/api/alerts/{first.id}/read", headers=_auth(user_id))
        assert response.status_code == 204

        response = client_with_db.post("/api/alerts/read_all", headers=_auth(user_id))
        assert response.status_code == 200
        assert response.json() == {"updated": 2}

    @pytest.mark.parametrize("method", ["post", "delete"])
    def test_other_users_alert_is_404(
        self, method: str, client_with_db: TestClient, db: Session
    ) -> None:
        alert = _alert(db, uuid.uuid4(), 0)
        path = f"/api/alerts/{alert.id}/read" if method == "post" else f"/api/alerts/{alert.id}"

        response = getattr(client_with_db, method)(path, headers=_auth(uuid.uuid4()))

        assert response.status_code == 404

    def test_delete(self, client_with_db: TestClient, db: Session) -> None:
        user_id = uuid.uuid4()
        alert = _alert(db, user_id, 0)

        response = client_with_db.delete(f"/api/alerts/{alert.id}", headers=_auth(user_id))

        assert response.status_code == 204
        assert list_alerts(db, user_id) == []
