"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache
from typing import Optional

from sqlalchemy.engine import make_url


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class SweepConfigError(RuntimeError):
    """Raised when the privileged data-platform connection is not configured."""


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "Advokat Expiry"
    debug: bool = False

    # Regular application connection (alert feed, cancellation, health)
    database_url: str = "postgresql+psycopg://localhost:5432/advokat_dev"
    db_connect_timeout: int = 10  # seconds

    # Privileged data-platform connection used by the expiration sweep.
    # Both must be set; the key is injected as the connection password.
    data_platform_url: Optional[str] = None
    service_role_key: Optional[str] = None

    # Security
    jwt_secret: str = ""  # HS256 secret shared with the identity provider
    internal_job_token: str = ""  # Required for /internal/* endpoints

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'advokat_dev')}"
        )
        self.database_url = _with_psycopg_driver(os.getenv("DATABASE_URL", default_url))
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        platform_url = os.getenv("DATA_PLATFORM_URL") or None
        self.data_platform_url = _with_psycopg_driver(platform_url) if platform_url else None
        self.service_role_key = os.getenv("SERVICE_ROLE_KEY") or None

        self.jwt_secret = os.getenv("JWT_SECRET", "")
        self.internal_job_token = os.getenv("INTERNAL_JOB_TOKEN", "")

    def service_database_url(self) -> str:
        """Connection URL for the sweep: platform endpoint plus service credential.

        Raises SweepConfigError when either value is missing.
        """
        missing = [
            name
            for name, value in (
                ("DATA_PLATFORM_URL", self.data_platform_url),
                ("SERVICE_ROLE_KEY", self.service_role_key),
            )
            if not value
        ]
        if missing:
            raise SweepConfigError(f"Missing required configuration: {', '.join(missing)}")
        url = make_url(self.data_platform_url).set(password=self.service_role_key)
        return url.render_as_string(hide_password=False)


def _with_psycopg_driver(raw_url: str) -> str:
    # Ensure psycopg3 driver if URL uses generic postgresql://
    if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
        return raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return raw_url
