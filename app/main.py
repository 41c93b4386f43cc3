"""
Advokat expiry service FastAPI application entry point.

Jobs: auto-expire stale requests → activity alerts for both parties.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app import __version__
from app.config import get_settings
from app.db.session import check_db_connection, engine

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    settings = get_settings()
    logger.info("%s starting", settings.app_name)
    try:
        try:
            check_db_connection()
            logger.info("Database connection verified")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise

        if not settings.data_platform_url or not settings.service_role_key:
            logger.warning(
                "DATA_PLATFORM_URL or SERVICE_ROLE_KEY not set; "
                "/internal/auto_expire_requests will fail until configured"
            )

        yield
    finally:
        logger.info("%s shutting down", settings.app_name)
        engine.dispose()
        logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Mount API routes
    from app.api.alerts import router as alerts_router
    from app.api.requests import router as requests_router

    app.include_router(alerts_router, prefix="/api/alerts", tags=["alerts"])
    app.include_router(requests_router, prefix="/api/requests", tags=["requests"])

    # Internal job endpoints (cron/scripts, token-authenticated)
    from app.api.internal import router as internal_router

    app.include_router(internal_router, tags=["internal"])

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint. Confirms DB connectivity."""
        from sqlalchemy import text

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {
                "status": "ok",
                "version": __version__,
                "database": "connected",
            }
        except Exception:
            from fastapi.responses import JSONResponse

            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "version": __version__,
                    "database": "disconnected",
                },
            )

    return app


app = create_app()
