from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class UserRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    USER = "user"


def _uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column("password", String(255))
    phone_number: Mapped[Optional[str]] = mapped_column("phoneNumber", String(20), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        default=UserRole.USER,
    )
    # jti do último refresh emitido (rotação/logout)
    refresh_token: Mapped[Optional[str]] = mapped_column("refreshToken", String(500), nullable=True)
    admin_id: Mapped[Optional[str]] = mapped_column(
        "adminId", ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    admin: Mapped[Optional["User"]] = relationship(back_populates="users", remote_side="User.id")
    users: Mapped[List["User"]] = relationship(back_populates="admin")
    events = relationship("Event", back_populates="created_by")
    assigned_events = relationship("Event", secondary="users_events", back_populates="assigned_users")
    # sem cascade: ao remover o usuário o histórico fica com checkedInById = NULL
    check_in_logs = relationship("CheckInLog", back_populates="checked_in_by", passive_deletes=True)
