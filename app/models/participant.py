from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

# campos demográficos que um re-envio (upsert) pode sobrescrever
DEMOGRAPHIC_FIELDS = (
    "name",
    "date_of_birth",
    "sex",
    "county",
    "constituency",
    "ward",
    "polling_center",
    "group",
    "phone_number",
    "is_registered_voter",
    "is_invited",
)

# dimensões aceitas pelos breakdowns hierárquicos
LOCATION_FIELDS = ("county", "constituency", "ward", "group")


class Participant(Base):
    __tablename__ = "participants"

    id: Mapped[str] = mapped_column(String(255), primary_key=True, default=lambda: str(uuid.uuid4()))
    id_number: Mapped[Optional[str]] = mapped_column("idNumber", String(50), nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column("dateOfBirth", Date, nullable=True)
    sex: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    county: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    constituency: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    ward: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    polling_center: Mapped[Optional[str]] = mapped_column("pollingCenter", String(255), nullable=True)
    group: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column("phoneNumber", String(20), nullable=True)
    is_registered_voter: Mapped[Optional[bool]] = mapped_column("isRegisteredVoter", Boolean, nullable=True, default=False)
    is_invited: Mapped[Optional[bool]] = mapped_column("isInvited", Boolean, nullable=True, default=False)
    event_id: Mapped[Optional[str]] = mapped_column(
        "eventId", ForeignKey("events.eventId", ondelete="CASCADE"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    event = relationship("Event", back_populates="participants")
    check_in_logs = relationship(
        "CheckInLog",
        back_populates="participant",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CheckInLog.checked_in_at.desc()",
    )

    __table_args__ = (
        Index("ix_participants_event_id_number", "eventId", "idNumber"),
    )
