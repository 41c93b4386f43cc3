"""Tests for the internal auto-expire job endpoint (/internal/auto_expire_requests)."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models import Consultation, Lawyer, LegalAssistanceRequest
from app.services.expiration_sweep import StoreUpdateError, SweepSummary

# ── Fixtures ────────────────────────────────────────────────────────

VALID_TOKEN = "test-internal-token"  # matches conftest.py env setup
URL = "/internal/auto_expire_requests"


def _summary() -> SweepSummary:
    return SweepSummary(
        expired_consultations=2,
        expired_assistance=1,
        alerts_created=6,
        alerts_failed=0,
        timestamp=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )


# ── Preflight ───────────────────────────────────────────────────────


class TestPreflight:
    @patch("app.api.internal.run_expiration_sweep")
    def test_options_returns_cors_headers_without_running(self, mock_sweep, client: TestClient):
        response = client.options(URL)

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "content-type" in response.headers["access-control-allow-headers"]
        mock_sweep.assert_not_called()


# ── Auth ────────────────────────────────────────────────────────────


class TestAuth:
    def test_missing_token_returns_422(self, client: TestClient):
        response = client.post(URL)
        assert response.status_code == 422
        assert response.headers["access-control-allow-origin"] == "*"

    @patch("app.api.internal.run_expiration_sweep")
    def test_wrong_token_returns_403(self, mock_sweep, client: TestClient):
        response = client.post(URL, headers={"X-Internal-Token": "wrong-token"})
        assert response.status_code == 403
        assert response.headers["access-control-allow-origin"] == "*"
        assert "x-internal-token" in response.headers["access-control-allow-headers"]
        mock_sweep.assert_not_called()


# ── Sweep ───────────────────────────────────────────────────────────


class TestAutoExpire:
    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "PATCH", "DELETE"])
    @patch("app.api.internal.run_expiration_sweep")
    def test_success_body(self, mock_sweep, method, client: TestClient, service_db):
        mock_sweep.return_value = _summary()

        response = client.request(method, URL, headers={"X-Internal-Token": VALID_TOKEN})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["expiredConsultations"] == 2
        assert data["expiredAssistance"] == 1
        assert data["timestamp"] == "2026-10-19T12:00:00+00:00"
        assert response.headers["access-control-allow-origin"] == "*"
        mock_sweep.assert_called_once_with(service_db)

    @patch("app.api.internal.run_expiration_sweep")
    def test_store_failure_returns_500(self, mock_sweep, client: TestClient, service_db):
        mock_sweep.side_effect = StoreUpdateError("Failed to expire consultations: boom")

        response = client.post(URL, headers={"X-Internal-Token": VALID_TOKEN})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to expire consultations: boom"}
        assert response.headers["access-control-allow-origin"] == "*"

    def test_missing_platform_config_returns_500(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ):
        """No DATA_PLATFORM_URL / SERVICE_ROLE_KEY: the invocation fails."""
        from app.config import get_settings

        monkeypatch.delenv("DATA_PLATFORM_URL", raising=False)
        monkeypatch.delenv("SERVICE_ROLE_KEY", raising=False)
        get_settings.cache_clear()
        try:
            response = client.post(URL, headers={"X-Internal-Token": VALID_TOKEN})
        finally:
            get_settings.cache_clear()

        assert response.status_code == 500
        assert "DATA_PLATFORM_URL" in response.json()["error"]
        assert "SERVICE_ROLE_KEY" in response.json()["error"]

    def test_end_to_end_against_db(self, client: TestClient, service_db: Session):
        """A stale consultation and assistance request are swept through the endpoint."""
        old = datetime.now(timezone.utc) - timedelta(minutes=90)
        lawyer = Lawyer(user_id=uuid.uuid4(), name="Siti Rahma, S.H.")
        service_db.add(lawyer)
        service_db.commit()
        consultation = Consultation(
            client_id=uuid.uuid4(), lawyer_id=lawyer.id, topic="Waris", created_at=old
        )
        assistance = LegalAssistanceRequest(
            client_id=uuid.uuid4(), lawyer_id=uuid.uuid4(), created_at=old
        )
        service_db.add_all([consultation, assistance])
        service_db.commit()

        response = client.post(URL, headers={"X-Internal-Token": VALID_TOKEN})

        assert response.status_code == 200
        data = response.json()
        assert data["expiredConsultations"] >= 1
        assert data["expiredAssistance"] >= 1
        service_db.refresh(consultation)
        service_db.refresh(assistance)
        assert consultation.status == "expired"
        assert assistance.status == "cancelled"
