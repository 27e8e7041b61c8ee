from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Index, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

UNIQUE_CHECKIN_CONSTRAINT = "uq_check_in_logs_participant_event_date"


class CheckInLog(Base):
    """One row per participant per event per calendar day. Rows are never updated."""

    __tablename__ = "check_in_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    participant_id: Mapped[str] = mapped_column(
        "participantId", ForeignKey("participants.id", ondelete="CASCADE")
    )
    event_id: Mapped[str] = mapped_column("eventId", ForeignKey("events.eventId", ondelete="CASCADE"))
    checked_in_by_id: Mapped[Optional[str]] = mapped_column(
        "checkedInById", ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    # só a data (sem hora/fuso): chave da unicidade e dos filtros por dia
    check_in_date: Mapped[date] = mapped_column("checkInDate", Date)
    # instante real do check-in: ordenação e exibição
    checked_in_at: Mapped[datetime] = mapped_column("checkedInAt", DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime(timezone=True), server_default=func.now())

    participant = relationship("Participant", back_populates="check_in_logs")
    event = relationship("Event", back_populates="check_in_logs")
    checked_in_by = relationship("User", back_populates="check_in_logs")

    __table_args__ = (
        UniqueConstraint("participantId", "eventId", "checkInDate", name=UNIQUE_CHECKIN_CONSTRAINT),
        Index("ix_check_in_logs_event_id", "eventId"),
        Index("ix_check_in_logs_event_date", "eventId", "checkInDate"),
        Index("ix_check_in_logs_checked_in_by", "checkedInById"),
    )
