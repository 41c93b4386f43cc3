"""Legal assistance (pendampingan) request: in-person assistance by a lawyer."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.request_status import PENDING


class LegalAssistanceRequest(Base):
    """Assistance request; a stale pending request is cancelled, not expired."""

    __tablename__ = "legal_assistance_requests"

    __table_args__ = (
        Index("ix_legal_assistance_requests_status_created_at", "status", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    # Not a foreign key: lawyer rows may be removed independently of requests.
    lawyer_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    case_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=PENDING)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    auto_expired: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)
    cancel_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancelled_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
