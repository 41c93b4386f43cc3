"""Internal job endpoints for cron/scripts.

These endpoints are secured with a static token (X-Internal-Token header),
NOT bearer-token auth.  They are meant for automated triggers only.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Response
from fastapi.responses import JSONResponse

from app.api.deps import require_internal_token
from app.db.session import service_session
from app.services.expiration_sweep import run_expiration_sweep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", include_in_schema=False)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "authorization, x-client-info, apikey, content-type, x-internal-token"
    ),
}

SWEEP_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def _require_token_with_cors(x_internal_token: str | None = Header(None)) -> None:
    """Internal token guard whose 422/403 rejections carry the CORS headers."""
    if x_internal_token is None:
        logger.warning("Internal endpoint auth failed: missing token")
        raise HTTPException(
            status_code=422,
            detail="Missing X-Internal-Token header",
            headers=CORS_HEADERS,
        )
    try:
        require_internal_token(x_internal_token)
    except HTTPException as exc:
        raise HTTPException(
            status_code=exc.status_code, detail=exc.detail, headers=CORS_HEADERS
        ) from None


# ── Endpoints ───────────────────────────────────────────────────────


@router.options("/auto_expire_requests")
def auto_expire_requests_preflight() -> Response:
    """CORS preflight; never runs the sweep."""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.api_route("/auto_expire_requests", methods=SWEEP_METHODS)
def auto_expire_requests(
    _token: None = Depends(_require_token_with_cors),
) -> JSONResponse:
    """Expire stale pending consultations and assistance requests.

    Called hourly by the external scheduler. Opens a privileged session for
    the duration of the sweep. Returns counts on success, ``{"error": ...}``
    with status 500 on failure (including missing platform configuration).
    """
    try:
        with service_session() as db:
            summary = run_expiration_sweep(db)
    except Exception as exc:
        logger.exception("Auto-expire job failed")
        return JSONResponse(
            status_code=500,
            content={"error": str(exc) or "Unknown error"},
            headers=CORS_HEADERS,
        )
    return JSONResponse(status_code=200, content=summary.as_response(), headers=CORS_HEADERS)
