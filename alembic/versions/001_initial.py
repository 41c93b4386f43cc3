"""Initial schema: lawyers, consultations, legal assistance requests, activity alerts.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Mirrors the columns of the data platform tables this service reads and writes.
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _request_columns() -> list[sa.Column]:
    return [
        sa.Column("status", sa.String(32), server_default=sa.text("'pending'"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("auto_expired", sa.Boolean(), server_default=sa.false(), nullable=True),
        sa.Column("cancel_reason", sa.Text(), nullable=True),
        sa.Column("cancelled_by", sa.Uuid(), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "lawyers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_lawyers_user_id", "lawyers", ["user_id"])

    op.create_table(
        "consultations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column("lawyer_id", sa.Uuid(), nullable=False),
        sa.Column("topic", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("price", sa.Integer(), server_default=sa.text("0"), nullable=False),
        *_request_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_consultations_client_id", "consultations", ["client_id"])
    op.create_index("ix_consultations_lawyer_id", "consultations", ["lawyer_id"])

    op.create_table(
        "legal_assistance_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column("lawyer_id", sa.Uuid(), nullable=False),
        sa.Column("case_description", sa.Text(), server_default=sa.text("''"), nullable=False),
        *_request_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_legal_assistance_requests_client_id", "legal_assistance_requests", ["client_id"]
    )
    op.create_index(
        "ix_legal_assistance_requests_lawyer_id", "legal_assistance_requests", ["lawyer_id"]
    )

    op.create_table(
        "user_activity_alerts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("related_id", sa.Uuid(), nullable=True),
        sa.Column("is_read", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("user_activity_alerts", if_exists=True)
    op.drop_table("legal_assistance_requests", if_exists=True)
    op.drop_table("consultations", if_exists=True)
    op.drop_table("lawyers", if_exists=True)
