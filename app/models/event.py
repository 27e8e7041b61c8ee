from __future__ import annotations

import uuid
import datetime as dt
from typing import Optional

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Table, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

# M2M: staff com acesso explícito ao evento
users_events = Table(
    "users_events",
    Base.metadata,
    Column("userId", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("eventId", ForeignKey("events.eventId", ondelete="CASCADE"), primary_key=True),
    UniqueConstraint("userId", "eventId", name="uq_users_events"),
)


class Event(Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column("eventId", String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_name: Mapped[str] = mapped_column("eventName", String(255))
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    created_by_id: Mapped[str] = mapped_column("createdById", ForeignKey("users.id"), index=True)
    created_at: Mapped[dt.datetime] = mapped_column("createdAt", DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[dt.datetime] = mapped_column(
        "updatedAt", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    created_by = relationship("User", back_populates="events")
    assigned_users = relationship("User", secondary=users_events, back_populates="assigned_events")
    participants = relationship(
        "Participant", back_populates="event", cascade="all, delete-orphan", passive_deletes=True
    )
    check_in_logs = relationship(
        "CheckInLog", back_populates="event", cascade="all, delete-orphan", passive_deletes=True
    )
