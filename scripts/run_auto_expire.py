#!/usr/bin/env python3
"""Run the request auto-expiration sweep locally.

Usage:
    python scripts/run_auto_expire.py

Requires DATA_PLATFORM_URL and SERVICE_ROLE_KEY. Expires pending consultations
and assistance requests older than one hour and alerts both parties.
Exits 0 on success, 1 on failure.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.db.session import service_session
from app.services.expiration_sweep import run_expiration_sweep


def main() -> int:
    try:
        with service_session() as db:
            summary = run_expiration_sweep(db)
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    print(
        f"expired_consultations={summary.expired_consultations} "
        f"expired_assistance={summary.expired_assistance} "
        f"alerts_created={summary.alerts_created} "
        f"alerts_failed={summary.alerts_failed} "
        f"timestamp={summary.timestamp.isoformat()}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
