"""Consultation model: chat/call consultation booked by a client with a lawyer."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.request_status import PENDING


class Consultation(Base):
    """Consultation request (pending → active → completed, or expired/cancelled)."""

    __tablename__ = "consultations"

    __table_args__ = (Index("ix_consultations_status_created_at", "status", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    # Not a foreign key: lawyer rows may be removed independently of requests.
    lawyer_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    topic: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
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
