"""add sweep predicate and alert feed indexes

Revision ID: 20261019_sweep_idx
Revises: 001
Create Date: 2026-10-19

The auto-expire sweep filters on (status, created_at); the alert feed reads
by user_id ordered by created_at.
"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_sweep_idx"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_index(
        "ix_consultations_status_created_at",
        "consultations",
        ["status", "created_at"],
    )
    op.create_index(
        "ix_legal_assistance_requests_status_created_at",
        "legal_assistance_requests",
        ["status", "created_at"],
    )
    op.create_index(
        "ix_user_activity_alerts_user_created",
        "user_activity_alerts",
        ["user_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_user_activity_alerts_user_created", table_name="user_activity_alerts")
    op.drop_index(
        "ix_legal_assistance_requests_status_created_at",
        table_name="legal_assistance_requests",
    )
    op.drop_index("ix_consultations_status_created_at", table_name="consultations")
